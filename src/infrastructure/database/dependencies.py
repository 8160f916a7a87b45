"""FastAPI dependency injection for database access.

The application's ``Database`` lives on ``app.state.database``. Each request
gets its own session from that pool and an ``AnimalStore`` bound to it.

Example:
    @router.get("/allanimals")
    async def list_animals(store: AnimalStoreDep) -> list[AnimalRecord]:
        return await store.list_all()
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.animal_store import AnimalStore
from src.infrastructure.database.session import Database


def get_database(request: Request) -> Database:
    """Return the storage handle owned by the running application."""
    return request.app.state.database


async def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession]:
    """Provide a request-scoped session, closed when the request finishes."""
    async with database.session() as session:
        yield session


def get_animal_store(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> AnimalStore:
    """Provide an ``AnimalStore`` bound to the request's session."""
    return AnimalStore(session)


AnimalStoreDep = Annotated[AnimalStore, Depends(get_animal_store)]
