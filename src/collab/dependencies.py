"""Dependency injection for FastAPI endpoints."""

from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from .auth.principal import Principal
from .database import User, session_scope
from .repositories import UserRepository


# Database session dependency
async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with session_scope(request.app.state.session_maker) as session:
        yield session


async def get_user_repository(
    session: AsyncSession = Depends(get_session)
) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(User, session)


# Authentication dependencies
async def get_current_principal(request: Request) -> Principal:
    """
    Get the principal resolved by AuthenticationMiddleware.

    Raises:
        HTTPException: If the route was reached without authentication
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing authorization header",
        )
    return principal


async def get_current_user(
    principal: Principal = Depends(get_current_principal),
) -> User:
    """Get current authenticated user."""
    return principal.user


async def get_current_admin_user(
    user: User = Depends(get_current_user)
) -> User:
    """
    Get current user and verify admin flag.

    Raises:
        HTTPException: If user is not admin
    """
    if not user.admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return user
