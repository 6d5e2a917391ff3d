"""Base repository pattern for all data access."""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import IdentityStoreError
from ..database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common read operations.

    Storage failures are re-raised as IdentityStoreError so callers only
    ever see the service's own exception hierarchy.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get(self, id: int) -> Optional[ModelType]:
        """Get single record by ID."""
        return await self._scalar_one_or_none(
            "get", select(self.model).where(self.model.id == id)
        )

    async def get_multi(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        """Get multiple records ordered by ID."""
        query = select(self.model).order_by(self.model.id).offset(skip).limit(limit)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise IdentityStoreError("get_multi", str(e)) from e
        return list(result.scalars().all())

    async def _scalar_one_or_none(self, operation: str, query) -> Optional[ModelType]:
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise IdentityStoreError(operation, str(e)) from e
        return result.scalar_one_or_none()
