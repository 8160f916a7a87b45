"""Shared fixtures for unit tests."""

from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a real Settings object with test values.

    Returns:
        Settings: Development settings named ``TestApp``.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    return Settings()


@pytest.fixture
def mock_session(mocker: MockerFixture) -> MockType:
    """Provide a mock AsyncSession.

    Returns:
        MockType: Session whose ``execute`` and ``commit`` are async mocks.
    """
    session = mocker.AsyncMock(spec=AsyncSession)
    return cast("MockType", session)


@pytest.fixture
def mock_result(mocker: MockerFixture, mock_session: MockType) -> MockType:
    """Provide the result object returned by ``mock_session.execute``.

    Returns:
        MockType: Synchronous mock standing in for a SQLAlchemy ``Result``.
    """
    result = mocker.Mock()
    mock_session.execute.return_value = result
    return cast("MockType", result)
