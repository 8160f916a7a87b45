"""ORM mapping of the animal catalog table."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.base import BaseModel

# Columns a caller may write, in table order
ANIMAL_FIELDS: tuple[str, ...] = (
    "animal_name",
    "animal_char",
    "animal_desc",
    "animal_habitat",
    "animal_diet",
    "animal_agg",
    "animal_cat",
    "animal_pic",
)


class Animal(BaseModel):
    """One catalog entry.

    Only ``animal_name`` is required. ``animal_agg`` holds either a number or
    a label, so it is stored as text.
    """

    __tablename__ = "animalweb"

    animal_name: Mapped[str] = mapped_column(String(255), nullable=False)
    animal_char: Mapped[str | None] = mapped_column(Text)
    animal_desc: Mapped[str | None] = mapped_column(Text)
    animal_habitat: Mapped[str | None] = mapped_column(Text)
    animal_diet: Mapped[str | None] = mapped_column(Text)
    animal_agg: Mapped[str | None] = mapped_column(String(50))
    animal_cat: Mapped[str | None] = mapped_column(String(100), index=True)
    animal_pic: Mapped[str | None] = mapped_column(Text)


# Bounded text columns and their limits
COLUMN_MAX_LENGTHS: dict[str, int] = {
    column.name: column.type.length
    for column in Animal.__table__.columns
    if isinstance(column.type, String)
    and not isinstance(column.type, Text)
    and column.type.length is not None
}
