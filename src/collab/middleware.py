"""Middleware that authenticates every non-public request."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .auth.resolver import CredentialResolver
from .core.exceptions import CollabException, InternalError
from .database import User, session_scope
from .repositories import UserRepository

logger = logging.getLogger(__name__)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Resolve the Authorization header before route handlers run.

    On success the principal is stored on ``request.state.principal``.
    Rejected requests never reach the route handler.
    """

    # Routes that bypass authentication
    PUBLIC_ROUTES = {
        "/health",
        "/api/health",
    }

    async def dispatch(self, request: Request, call_next):
        """Authenticate the request, then hand it on."""

        if request.url.path in self.PUBLIC_ROUTES:
            return await call_next(request)

        resolver: CredentialResolver = request.app.state.resolver
        session_maker = request.app.state.session_maker

        try:
            async with session_scope(session_maker) as session:
                principal = await resolver.resolve(
                    request.headers.get("authorization"),
                    UserRepository(User, session),
                )
        except InternalError as e:
            logger.error(f"Authentication failed internally: {e.message}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"},
            )
        except CollabException as e:
            return JSONResponse(
                status_code=e.status_code,
                content={"error": e.message},
            )
        except Exception as e:
            logger.error(f"Authentication middleware error: {type(e).__name__}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"},
            )

        request.state.principal = principal
        return await call_next(request)
