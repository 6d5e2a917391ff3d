"""Client for the upstream authority that verifies numeric-id access tokens."""

from typing import Optional

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..core.exceptions import (
    AuthorityResponseError,
    AuthorityUnavailableError,
    CredentialRejectedError,
)


class AuthenticatedUser(BaseModel):
    """User as asserted by the authority."""
    id: int
    github_login: str
    avatar_url: Optional[str] = None
    name: Optional[str] = None


class GetAuthenticatedUserResponse(BaseModel):
    """Body of a successful ``/client/users/me`` response."""
    user: AuthenticatedUser
    feature_flags: list[str] = []


class AuthorityClient:
    """Proof-of-possession checks against the authority.

    One request per call, no retries. The shared ``httpx.AsyncClient`` is
    owned by the caller.
    """

    def __init__(self, base_url: str, http_client: httpx.AsyncClient, timeout: float = 5.0):
        """Initialize authority client.

        Args:
            base_url: Base URL of the authority
            http_client: Shared async HTTP client
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    @property
    def users_me_url(self) -> str:
        return f"{self.base_url}/client/users/me"

    async def get_authenticated_user(self, user_id: int, access_token: str) -> GetAuthenticatedUserResponse:
        """Ask the authority who owns ``access_token``.

        Returns:
            The authority's view of the user. Its ``user.id`` may differ from
            the claimed ``user_id``.

        Raises:
            CredentialRejectedError: Authority answered with a non-success
                status, or the token is not ASCII and was never sent
            AuthorityUnavailableError: Connection failure or timeout
            AuthorityResponseError: Success status with an unparseable body
        """
        url = self.users_me_url
        if not access_token.isascii():
            logger.info(f"Non-ASCII access token for user {user_id}, not forwarding")
            raise CredentialRejectedError(user_id, 401)

        try:
            response = await self.http_client.get(
                url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"{user_id} {access_token}",
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Authority request failed for user {user_id}: {e!r}")
            raise AuthorityUnavailableError(url, e) from e

        if response.is_error:
            logger.info(f"Authority rejected credential for user {user_id}: HTTP {response.status_code}")
            raise CredentialRejectedError(user_id, response.status_code)

        try:
            return GetAuthenticatedUserResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Authority returned unparseable body for user {user_id}: {e}")
            raise AuthorityResponseError(url, str(e)) from e
