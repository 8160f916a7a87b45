"""Database access with async SQLAlchemy over asyncpg.

- **base**: Declarative base and the shared ``id`` column
- **models**: The ``Animal`` mapping of the ``animalweb`` table
- **session**: ``Database`` handle owning the engine and bounded pool
- **repository**: Generic statement-level CRUD
- **animal_store**: Catalog operations with validation and error translation
- **dependencies**: FastAPI dependency helpers
"""

from src.infrastructure.database.animal_store import AnimalStore
from src.infrastructure.database.base import Base, BaseModel
from src.infrastructure.database.dependencies import (
    AnimalStoreDep,
    get_animal_store,
    get_db,
)
from src.infrastructure.database.models import Animal
from src.infrastructure.database.repository import BaseRepository
from src.infrastructure.database.session import Database, create_database_engine

__all__ = [
    "Animal",
    "AnimalStore",
    "AnimalStoreDep",
    "Base",
    "BaseModel",
    "BaseRepository",
    "Database",
    "create_database_engine",
    "get_animal_store",
    "get_db",
]
