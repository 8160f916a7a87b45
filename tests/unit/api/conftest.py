"""Fixtures for API unit tests."""

from typing import cast

import pytest
from fastapi import Request
from pytest_mock import MockerFixture, MockType
from starlette.datastructures import URL

from src.core.config import Settings


@pytest.fixture
def mock_request(mocker: MockerFixture, mock_settings: Settings) -> MockType:
    """Create a mock FastAPI Request for ``POST /addanimal``.

    Returns:
        MockType: Mock request with method, path, headers, client and the
            serving application's settings.
    """
    request = mocker.Mock(spec=Request)
    request.method = "POST"
    request.url = mocker.Mock(spec=URL)
    request.url.path = "/addanimal"
    request.headers = {"user-agent": "test-client/1.0"}
    request.client = mocker.Mock()
    request.client.host = "127.0.0.1"
    request.app.state.settings = mock_settings
    return cast("MockType", request)
