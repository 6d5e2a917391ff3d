"""Database models and connection for the collab identity store."""

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def create_engine_and_sessionmaker(
    database_url: str,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create the async engine and session factory for a database URL."""
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    if is_sqlite:
        engine = create_async_engine(database_url, echo=False)
    else:
        engine = create_async_engine(database_url, echo=False, pool_pre_ping=True)

    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    return engine, session_maker


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class User(Base):
    """Durable user identity.

    ``github_login`` is always stored lowercased. ``github_user_id`` is the
    provider-assigned id, or a synthetic one for users bootstrapped through
    the admin token.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    github_login: Mapped[str] = mapped_column(String(39), unique=True, nullable=False)
    github_user_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    email_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, github_login={self.github_login!r}, admin={self.admin})"


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on success and rolls back on error."""
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
