"""Base repository implementing statement-level CRUD for SQLAlchemy models.

Every mutation is a single ``INSERT``/``UPDATE``/``DELETE`` built with
SQLAlchemy Core, so values are always sent as bound parameters. Update and
delete return the affected-row count, letting callers tell "no such row"
apart from success without a separate existence check.
"""

from collections.abc import Mapping
from typing import Generic, TypeVar

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import func, insert, select
from sqlalchemy import update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.base import BaseModel


T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository over a model inheriting from ``BaseModel``.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class AnimalStore(BaseRepository[Animal]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Animal)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    async def get_by_id(self, entity_id: int) -> T | None:
        """Fetch one row by primary key, or None if absent."""
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> list[T]:
        """Fetch every row ordered by ID."""
        stmt = select(self.model_class).order_by(self.model_class.id)
        result = await self.session.execute(stmt)
        instances = list(result.scalars().all())
        logger.debug(
            "Retrieved {} {} instances", len(instances), self.model_class.__name__
        )
        return instances

    async def filter_by(self, **kwargs: object) -> list[T]:
        """Fetch rows where every given column equals the given value.

        Args:
            **kwargs: Column-value pairs to filter by.

        Returns:
            list[T]: Matching rows ordered by ID (possibly empty).

        Raises:
            AttributeError: If a keyword is not a column of the model.
        """
        stmt = select(self.model_class)
        for field, value in kwargs.items():
            stmt = stmt.where(getattr(self.model_class, field) == value)
        stmt = stmt.order_by(self.model_class.id)

        result = await self.session.execute(stmt)
        instances = list(result.scalars().all())
        logger.debug(
            "Filtered {} - found {} instances with filters: {}",
            self.model_class.__name__,
            len(instances),
            kwargs,
        )
        return instances

    async def count(self) -> int:
        """Count all rows."""
        stmt = select(func.count(self.model_class.id))
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def insert(self, values: Mapping[str, object]) -> int:
        """Insert one row and return its generated ID.

        Args:
            values: Column-value pairs for the new row.

        Returns:
            int: The store-generated primary key.
        """
        stmt = (
            insert(self.model_class)
            .values(dict(values))
            .returning(self.model_class.id)
        )
        result = await self.session.execute(stmt)
        new_id = int(result.scalar_one())
        logger.info("Created {} with ID: {}", self.model_class.__name__, new_id)
        return new_id

    async def update_by_id(self, entity_id: int, values: Mapping[str, object]) -> int:
        """Update one row by primary key.

        Args:
            entity_id: The primary key of the row to update.
            values: Column-value pairs to write.

        Returns:
            int: Number of rows matched (0 when no row has this ID).
        """
        stmt = (
            sql_update(self.model_class)
            .where(self.model_class.id == entity_id)
            .values(dict(values))
        )
        result = await self.session.execute(stmt)
        updated = result.rowcount or 0
        logger.info(
            "Updated {} ID {} - rows affected: {}",
            self.model_class.__name__,
            entity_id,
            updated,
        )
        return updated

    async def delete_by_id(self, entity_id: int) -> int:
        """Delete one row by primary key.

        Returns:
            int: Number of rows deleted (0 when no row has this ID).
        """
        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        deleted = result.rowcount or 0
        logger.info(
            "Deleted {} ID {} - rows affected: {}",
            self.model_class.__name__,
            entity_id,
            deleted,
        )
        return deleted
