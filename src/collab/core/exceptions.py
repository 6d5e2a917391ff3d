"""Custom exceptions for the collab service."""


class CollabException(Exception):
    """Base exception for all collab errors."""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


# Credential Exceptions
class BadRequestError(CollabException):
    """Malformed authorization credential."""
    def __init__(self, message: str = "Bad request"):
        super().__init__(message, status_code=400)


class UnauthenticatedError(CollabException):
    """Well-formed credential that could not be proven."""
    def __init__(self, message: str = "invalid credentials"):
        super().__init__(message, status_code=401)


# Internal Exceptions
class InternalError(CollabException):
    """Storage or infrastructure failure unrelated to the credential."""
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, status_code=500)


class IdentityStoreError(InternalError):
    """The identity store failed."""
    def __init__(self, operation: str, reason: str):
        super().__init__(f"identity store {operation} failed: {reason}")
        self.operation = operation


class IdentityNotFoundError(InternalError):
    """A user that must exist is missing from the identity store."""
    def __init__(self, key: str):
        super().__init__(f"user {key} not found")
        self.key = key


# Authority Exceptions
class AuthorityError(CollabException):
    """Base class for failures of the external verification authority.

    Subclasses only classify the failure for logging; every one of them
    reaches the caller as a 401.
    """
    def __init__(self, message: str):
        super().__init__(message, status_code=401)


class CredentialRejectedError(AuthorityError):
    """The authority answered and refused the credential."""
    def __init__(self, user_id: int, http_status: int):
        super().__init__(f"authority rejected credential for user {user_id} (HTTP {http_status})")
        self.user_id = user_id
        self.http_status = http_status


class AuthorityUnavailableError(AuthorityError):
    """The authority could not be reached or timed out."""
    def __init__(self, url: str, original_error: Exception):
        super().__init__(f"cannot reach authority at {url}: {original_error}")
        self.url = url
        self.original_error = original_error


class AuthorityResponseError(AuthorityError):
    """The authority answered with a body we could not parse."""
    def __init__(self, url: str, reason: str):
        super().__init__(f"unparseable authority response from {url}: {reason}")
        self.url = url
