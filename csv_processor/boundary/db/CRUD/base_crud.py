"""
Generic async CRUD helpers.

Only what the job and record stores share: insert and primary key lookup.
Nothing is ever hard deleted.
Methods flush but never commit; the caller owns the transaction.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Shared operations for one ORM model.

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **fields: Any) -> ModelT:
        """
        Insert a row and return it with server-side values loaded.

        Args:
            session: Async database session
            **fields: Column values

        Returns:
            The flushed model instance
        """
        instance = self.model(**fields)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """Row with this primary key, or None."""
        return await session.get(self.model, id)
