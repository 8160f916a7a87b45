"""Shared fixtures for integration tests.

Applications are built with ``create_app`` and driven through httpx's ASGI
transport. The ``AnimalStore`` dependency is replaced by an in-memory store
with the same contract, so no database is needed; httpx does not run the
lifespan, so the startup connection check is skipped as well.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping
from typing import TypeAlias

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from src.api.main import create_app
from src.core.config import Settings
from src.core.exceptions import StoreError
from src.infrastructure.database.animal_store import build_record_values
from src.infrastructure.database.dependencies import get_animal_store
from src.infrastructure.database.models import Animal

BASE_URL = "http://test"

ClientFactory: TypeAlias = Callable[..., Awaitable[AsyncClient]]


class InMemoryAnimalStore:
    """Dict-backed stand-in for ``AnimalStore``.

    Set ``fail`` to make every call raise ``StoreError`` as a broken
    database would.
    """

    def __init__(self) -> None:
        self.rows: dict[int, Animal] = {}
        self.next_id = 1
        self.fail = False

    def _check(self, message: str) -> None:
        if self.fail:
            cause = OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
            raise StoreError(message, cause=cause)

    async def list_all(self) -> list[Animal]:
        self._check("Server error for allanimals!")
        return [self.rows[key] for key in sorted(self.rows)]

    async def list_by_category(self, category: str) -> list[Animal]:
        self._check("Failed to fetch animals by category")
        return [row for row in await self.list_all() if row.animal_cat == category]

    async def get(self, animal_id: int) -> Animal | None:
        self._check("Failed to fetch animal")
        return self.rows.get(animal_id)

    async def count(self) -> int:
        self._check("Failed to fetch animal count")
        return len(self.rows)

    async def create(self, fields: Mapping[str, object]) -> int:
        values = build_record_values(fields)
        self._check(f"Server error - could not add animal {values['animal_name']}")
        new_id = self.next_id
        self.next_id += 1
        self.rows[new_id] = Animal(id=new_id, **values)
        return new_id

    async def update(self, animal_id: int, fields: Mapping[str, object]) -> int:
        values = build_record_values(fields)
        self._check("Update failed")
        if animal_id not in self.rows:
            return 0
        self.rows[animal_id] = Animal(id=animal_id, **values)
        return 1

    async def delete(self, animal_id: int) -> int:
        self._check("Delete failed")
        return 1 if self.rows.pop(animal_id, None) is not None else 0


@pytest.fixture
def animal_store() -> InMemoryAnimalStore:
    """Empty in-memory store."""
    return InMemoryAnimalStore()


@pytest.fixture
def settings() -> Settings:
    """Default settings as seen without any environment overrides."""
    return Settings()


def build_app(settings: Settings, store: InMemoryAnimalStore) -> FastAPI:
    """Create an application wired to ``store``."""
    application = create_app(settings)
    application.dependency_overrides[get_animal_store] = lambda: store
    return application


@pytest.fixture
def app(settings: Settings, animal_store: InMemoryAnimalStore) -> FastAPI:
    """Application using the in-memory store."""
    return build_app(settings, animal_store)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client for ``app``."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url=BASE_URL
    ) as test_client:
        yield test_client


@pytest.fixture
async def client_factory(
    animal_store: InMemoryAnimalStore,
) -> AsyncGenerator[ClientFactory]:
    """Factory for clients whose app is built from custom settings.

    Usage:
        client = await client_factory(Settings(auth_config=AuthConfig(...)))
    """
    clients: list[AsyncClient] = []

    async def _create_client(
        custom_settings: Settings, *, raise_app_exceptions: bool = True
    ) -> AsyncClient:
        application = build_app(custom_settings, animal_store)
        transport = ASGITransport(
            app=application, raise_app_exceptions=raise_app_exceptions
        )
        new_client = AsyncClient(transport=transport, base_url=BASE_URL)
        clients.append(new_client)
        return new_client

    yield _create_client

    for created in clients:
        await created.aclose()


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization header for the demo identity."""
    response = await client.post(
        "/login", json={"username": "admin", "password": "admin123"}
    )
    return {"Authorization": f"Bearer {response.json()['token']}"}
