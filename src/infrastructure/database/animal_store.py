"""Data access for the animal catalog.

``AnimalStore`` is the only component that touches the ``animalweb`` table.
Reads return ORM rows; mutations return the new ID or the affected-row
count. A count of zero from ``update`` or ``delete`` means no record has that
ID; handlers turn it into a not-found response.

Any database or transport failure is logged here with full detail and
re-raised as ``StoreError`` carrying only a generic message, so driver
errors never reach the caller.
"""

from collections.abc import Generator, Mapping
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import StoreError, ValidationError
from src.core.types import RecordValues
from src.infrastructure.database.models import (
    ANIMAL_FIELDS,
    COLUMN_MAX_LENGTHS,
    Animal,
)
from src.infrastructure.database.repository import BaseRepository

NAME_FIELD = "animal_name"


@contextmanager
def _store_errors(
    message: str, operation: str, **context: object
) -> Generator[None]:
    """Translate storage failures raised inside the block into ``StoreError``."""
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        logger.opt(exception=e).error(
            "Animal store operation {} failed: {}",
            operation,
            type(e).__name__,
            operation=operation,
            **context,
        )
        raise StoreError(
            message, context={"operation": operation, **context}, cause=e
        ) from e


def build_record_values(fields: Mapping[str, object]) -> RecordValues:
    """Validate caller fields and map them onto table columns.

    Every writable column is present in the result; absent fields become
    NULL. Numeric aggression levels are stored as text.

    Args:
        fields: Field values keyed by column name. Unknown keys are ignored.

    Returns:
        RecordValues: Column values ready to bind.

    Raises:
        ValidationError: If ``animal_name`` is missing or blank, or a value
            is longer than its column allows.
    """
    name = fields.get(NAME_FIELD)
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(
            "animal_name is required.", context={"field": NAME_FIELD}
        )

    values: RecordValues = {}
    for column in ANIMAL_FIELDS:
        value = fields.get(column)
        text = None if value is None else str(value)
        max_length = COLUMN_MAX_LENGTHS.get(column)
        if text is not None and max_length is not None and len(text) > max_length:
            raise ValidationError(
                f"{column} must be at most {max_length} characters.",
                context={"field": column, "max_length": max_length},
            )
        values[column] = text
    return values


class AnimalStore(BaseRepository[Animal]):
    """Catalog operations over one session.

    Args:
        session: Session drawn from the application's ``Database`` pool.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Animal)

    async def list_all(self) -> list[Animal]:
        """Return every record ordered by ID."""
        with _store_errors("Server error for allanimals!", "list_all"):
            return await self.get_all()

    async def list_by_category(self, category: str) -> list[Animal]:
        """Return records whose category equals ``category`` (possibly none)."""
        with _store_errors(
            "Failed to fetch animals by category", "list_by_category"
        ):
            return await self.filter_by(animal_cat=category)

    async def get(self, animal_id: int) -> Animal | None:
        """Return one record, or None if no record has this ID."""
        with _store_errors("Failed to fetch animal", "get", animal_id=animal_id):
            return await self.get_by_id(animal_id)

    async def count(self) -> int:
        """Return the number of records."""
        with _store_errors("Failed to fetch animal count", "count"):
            return await super().count()

    async def create(self, fields: Mapping[str, object]) -> int:
        """Insert a record and return its new ID.

        Raises:
            ValidationError: If ``animal_name`` is missing or blank. Raised
                before any statement is sent.
            StoreError: If the insert fails.
        """
        values = build_record_values(fields)
        name = values[NAME_FIELD]
        with _store_errors(
            f"Server error - could not add animal {name}", "create"
        ):
            new_id = await self.insert(values)
            await self.session.commit()
        return new_id

    async def update(self, animal_id: int, fields: Mapping[str, object]) -> int:
        """Replace every writable column of one record.

        Returns:
            int: Rows updated; 0 when no record has this ID.

        Raises:
            ValidationError: If ``animal_name`` is missing or blank.
            StoreError: If the update fails.
        """
        values = build_record_values(fields)
        with _store_errors("Update failed", "update", animal_id=animal_id):
            updated = await self.update_by_id(animal_id, values)
            await self.session.commit()
        return updated

    async def delete(self, animal_id: int) -> int:
        """Delete one record.

        Returns:
            int: Rows deleted; 0 when no record has this ID.

        Raises:
            StoreError: If the delete fails.
        """
        with _store_errors("Delete failed", "delete", animal_id=animal_id):
            deleted = await self.delete_by_id(animal_id)
            await self.session.commit()
        return deleted
