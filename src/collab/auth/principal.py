"""Identity attached to an authenticated request."""

import enum
from dataclasses import dataclass

from ..database import User


class TrustLevel(str, enum.Enum):
    """How the principal proved who it is."""

    AUTHORITY_VERIFIED = "authority_verified"
    ADMIN_TOKEN = "admin_token"


@dataclass(frozen=True)
class Principal:
    """Resolved identity available to downstream handlers for one request."""

    user: User
    trust: TrustLevel

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def github_login(self) -> str:
        return self.user.github_login

    @property
    def is_admin(self) -> bool:
        return self.user.admin
