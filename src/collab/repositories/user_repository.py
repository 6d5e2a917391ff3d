"""User repository with identity lookups and trusted bootstrap."""

from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .base import BaseRepository
from ..auth.synthetic_id import synthetic_github_user_id
from ..core.exceptions import IdentityStoreError
from ..database import User

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    async def get_by_github_login(self, github_login: str) -> Optional[User]:
        """Get user by login. The login must already be normalized."""
        return await self._scalar_one_or_none(
            "get_by_github_login",
            select(User).where(User.github_login == github_login),
        )

    async def list_users(self, skip: int = 0, limit: int = 100) -> list[User]:
        """List users ordered by ID."""
        return await self.get_multi(skip=skip, limit=limit)

    async def create_user(
        self,
        github_login: str,
        email_address: Optional[str],
        admin: bool,
        github_user_id: int,
    ) -> User:
        """
        Insert a user unless one with this login exists, then return the stored row.

        A concurrent insert of the same login is not an error: the row that
        won is returned to every caller.

        Raises:
            IdentityStoreError: If the insert fails for any other reason, or
                no row exists for the login afterwards
        """
        values = {
            "github_login": github_login,
            "github_user_id": github_user_id,
            "email_address": email_address,
            "admin": admin,
        }

        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        try:
            if insert is not None:
                stmt = insert(User).values(**values).on_conflict_do_nothing(
                    index_elements=[User.github_login]
                )
                await self.session.execute(stmt)
            else:
                await self._insert_ignoring_duplicate(values)
        except SQLAlchemyError as e:
            raise IdentityStoreError("create_user", str(e)) from e

        user = await self.get_by_github_login(github_login)
        if user is None:
            raise IdentityStoreError("create_user", f"no row for {github_login} after insert")
        return user

    async def _insert_ignoring_duplicate(self, values: dict) -> None:
        try:
            async with self.session.begin_nested():
                self.session.add(User(**values))
        except IntegrityError:
            logger.debug(f"User {values['github_login']} created concurrently, reusing it")

    async def get_or_create_for_trusted_login(self, github_login: str) -> User:
        """
        Resolve a login to its user, creating it on first contact.

        New users get a placeholder email and a synthetic github_user_id
        derived from the login.
        """
        user = await self.get_by_github_login(github_login)
        if user is not None:
            return user

        logger.info(f"Bootstrapping user {github_login}")
        return await self.create_user(
            github_login,
            f"{github_login}@example.com",
            False,
            synthetic_github_user_id(github_login),
        )

    async def set_admin(self, github_login: str, admin: bool) -> Optional[User]:
        """Set the admin flag on a user. Returns None if the login is unknown."""
        user = await self.get_by_github_login(github_login)
        if user is None:
            return None

        user.admin = admin
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise IdentityStoreError("set_admin", str(e)) from e
        return user
