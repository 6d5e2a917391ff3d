"""Collab API.

Every route except the health checks sits behind AuthenticationMiddleware,
which resolves the Authorization header to a Principal.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI
from loguru import logger

from .auth.authority import AuthorityClient
from .auth.principal import Principal
from .auth.resolver import CredentialResolver
from .config import AuthConfig
from .database import User, create_engine_and_sessionmaker, init_db
from .dependencies import (
    get_current_admin_user,
    get_current_principal,
    get_user_repository,
)
from .middleware import AuthenticationMiddleware
from .repositories import UserRepository
from .schemas import HealthResponse, PrincipalResponse, UserResponse


def create_app(
    config: Optional[AuthConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Service configuration, read from the environment if omitted
        http_client: Client used to reach the authority; one is created
            (and closed on shutdown) if omitted
    """
    config = config or AuthConfig.from_env()
    owns_http_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient()

    engine, session_maker = create_engine_and_sessionmaker(config.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        await init_db(engine)
        logger.info(f"Collab API started, authority at {config.cloud_url}")
        yield
        if owns_http_client:
            await http_client.aclose()
        await engine.dispose()
        logger.info("Collab API shutting down")

    app = FastAPI(
        title="Collab API",
        description="Authenticated identity gateway for the collaboration backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    authority = AuthorityClient(
        config.cloud_url, http_client, timeout=config.authority_timeout_seconds
    )
    app.state.config = config
    app.state.engine = engine
    app.state.session_maker = session_maker
    app.state.resolver = CredentialResolver(config, authority)

    app.add_middleware(AuthenticationMiddleware)

    @app.get("/health", tags=["health"])
    @app.get("/api/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """Health check endpoint."""
        return HealthResponse()

    @app.get("/api/users/me", response_model=PrincipalResponse, tags=["users"])
    async def current_user(principal: Principal = Depends(get_current_principal)):
        """Return the authenticated caller."""
        return PrincipalResponse(
            user=UserResponse.model_validate(principal.user),
            trust=principal.trust.value,
        )

    @app.get("/api/admin/users", response_model=list[UserResponse], tags=["admin"])
    async def list_users(
        skip: int = 0,
        limit: int = 100,
        _admin: User = Depends(get_current_admin_user),
        users: UserRepository = Depends(get_user_repository),
    ):
        """List users. Admin only."""
        return [UserResponse.model_validate(u) for u in await users.list_users(skip, limit)]

    return app


def run():
    """Run the server."""
    import uvicorn
    uvicorn.run(
        "collab.server:create_app",
        factory=True,
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8080")),
    )


if __name__ == "__main__":
    run()
