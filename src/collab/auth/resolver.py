"""Authorization header validation and identity resolution.

Header format::

    Authorization: <user-id|github-login> <token>

For a numeric user id, ``<token>`` is an access token that the authority
must vouch for. For a GitHub login, ``<token>`` is ``ADMIN_TOKEN:`` followed
by the service's configured API token, and the user is created on first use.
"""

import hmac
import re
from typing import Optional

from loguru import logger

from .authority import AuthorityClient
from .login import is_valid_github_login, normalize_login
from .principal import Principal, TrustLevel
from ..config import AuthConfig
from ..core.exceptions import (
    AuthorityError,
    BadRequestError,
    IdentityNotFoundError,
    UnauthenticatedError,
)
from ..repositories.user_repository import UserRepository

LEGACY_DEV_SERVER_SUBJECT = "dev-server-token"
LEGACY_DEV_SERVER_MESSAGE = "Dev servers were removed in 0.157, please upgrade to SSH remoting"
ADMIN_TOKEN_PREFIX = "ADMIN_TOKEN:"

INVALID_CREDENTIALS = "invalid credentials"

_INT32_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def parse_user_id(subject: str) -> Optional[int]:
    """Parse ``subject`` as a decimal signed 32-bit integer, or return None."""
    if not _INT32_PATTERN.fullmatch(subject):
        return None
    value = int(subject)
    if value < _INT32_MIN or value > _INT32_MAX:
        return None
    return value


class CredentialResolver:
    """Turns an Authorization header into a Principal or a typed rejection."""

    def __init__(self, config: AuthConfig, authority: AuthorityClient):
        self.config = config
        self.authority = authority

    async def resolve(self, authorization: Optional[str], users: UserRepository) -> Principal:
        """
        Resolve the caller behind an Authorization header.

        Args:
            authorization: Raw header value, None if absent
            users: Identity store for this request

        Raises:
            BadRequestError: Malformed header
            UnauthenticatedError: Credential could not be proven
            InternalError: Identity store failure or inconsistency
        """
        # Non-ASCII header values are treated as absent.
        if authorization is None or not authorization.isascii():
            raise UnauthenticatedError("missing authorization header")

        parts = authorization.split()
        subject = parts[0] if parts else ""

        if subject == LEGACY_DEV_SERVER_SUBJECT:
            raise UnauthenticatedError(LEGACY_DEV_SERVER_MESSAGE)

        if len(parts) < 2:
            raise BadRequestError("missing access token in authorization header")
        secret = parts[1]

        user_id = parse_user_id(subject)
        if user_id is not None:
            return await self._resolve_access_token(user_id, secret, users)

        return await self._resolve_trusted_login(subject, secret, users)

    async def _resolve_access_token(
        self, claimed_user_id: int, access_token: str, users: UserRepository
    ) -> Principal:
        try:
            response = await self.authority.get_authenticated_user(claimed_user_id, access_token)
        except AuthorityError as e:
            logger.info(f"Access token check failed for user {claimed_user_id}: {type(e).__name__}")
            raise UnauthenticatedError(INVALID_CREDENTIALS) from e

        # The authority's id is authoritative, whatever the caller claimed.
        user_id = response.user.id
        if user_id != claimed_user_id:
            logger.warning(f"Authority asserted user {user_id} for claimed user {claimed_user_id}")

        user = await users.get(user_id)
        if user is None:
            raise IdentityNotFoundError(str(user_id))

        logger.debug(f"Authenticated user {user.id} ({user.github_login}) via access token")
        return Principal(user=user, trust=TrustLevel.AUTHORITY_VERIFIED)

    async def _resolve_trusted_login(
        self, subject: str, secret: str, users: UserRepository
    ) -> Principal:
        github_login = normalize_login(subject)
        if not github_login:
            raise BadRequestError("missing user id in authorization header")

        if not is_valid_github_login(github_login):
            raise BadRequestError("invalid github login in authorization header")

        if not secret.startswith(ADMIN_TOKEN_PREFIX):
            raise UnauthenticatedError(INVALID_CREDENTIALS)
        admin_token = secret[len(ADMIN_TOKEN_PREFIX):]

        if not self._admin_token_matches(admin_token):
            logger.info(f"Rejected admin token for {github_login}")
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        user = await users.get_or_create_for_trusted_login(github_login)
        logger.debug(f"Authenticated user {user.id} ({user.github_login}) via admin token")
        return Principal(user=user, trust=TrustLevel.ADMIN_TOKEN)

    def _admin_token_matches(self, admin_token: str) -> bool:
        expected = self.config.api_token
        if not expected:
            return False
        return hmac.compare_digest(admin_token.encode("utf-8"), expected.encode("utf-8"))
