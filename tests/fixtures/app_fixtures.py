"""Fixtures for FastAPI application and settings."""

import sys
from pathlib import Path
from typing import Any
from typing import Dict
from typing import Optional
from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from starlette.testclient import TestClient as StarletteTestClient

# Ensure tests can import from parent directory
THIS_DIR = Path(__file__).parent
TESTS_DIR = THIS_DIR.parent
TESTS_DIR_PARENT = (TESTS_DIR / "..").resolve()
sys.path.insert(0, str(TESTS_DIR_PARENT))

TEST_DEALER_ID = "dealer-42"

# Identity header sent by the dashboard on every request
DEFAULT_TEST_HEADERS = {
    "X-Dealer-Id": TEST_DEALER_ID,
}


class DealerTestClient(StarletteTestClient):
    """Test client that automatically includes the acting dealer header."""

    def __init__(self, *args: Any, default_headers: Optional[Dict[str, str]] = None, **kwargs: Any) -> None:
        """Initialize with default headers."""
        super().__init__(*args, **kwargs)
        self._default_headers = default_headers or DEFAULT_TEST_HEADERS

    def _merge_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Merge default headers with provided headers."""
        merged = dict(self._default_headers)
        if headers:
            merged.update(headers)
        return merged

    def get(self, url: str, **kwargs: Any) -> Any:
        """GET request with default headers."""
        kwargs["headers"] = self._merge_headers(kwargs.get("headers"))
        return super().get(url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        """POST request with default headers."""
        kwargs["headers"] = self._merge_headers(kwargs.get("headers"))
        return super().post(url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Any:
        """DELETE request with default headers."""
        kwargs["headers"] = self._merge_headers(kwargs.get("headers"))
        return super().delete(url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Any:
        """PATCH request with default headers."""
        kwargs["headers"] = self._merge_headers(kwargs.get("headers"))
        return super().patch(url, **kwargs)


@pytest.fixture
def mock_settings():
    """Settings with no database so that create_app never opens a real pool."""
    from dealerhub_api.settings import Settings

    with patch.dict(
        "os.environ",
        {
            "ENVIRONMENT": "test",
            "DATABASE_URL": "",
            "LOG_LEVEL": "DEBUG",
            "DEDUPE_CONTACTS": "false",
        },
    ):
        settings = Settings()
        yield settings


@pytest.fixture
def mock_db_pool():
    """Mock DealerDBPool; routes only read its .pool attribute and health methods."""
    pool = MagicMock()
    pool.pool = MagicMock()
    pool.initialize = AsyncMock(return_value=None)
    pool.close = AsyncMock(return_value=None)
    pool.health_check = AsyncMock(return_value=True)
    pool.get_table_counts = AsyncMock(return_value={"car_offers": 3, "car_offer_shares": 1})
    return pool


@pytest.fixture
def app(mock_settings, mock_db_pool):
    """Create FastAPI test application with mocked settings and database pool."""
    from dealerhub_api.main import create_app

    app = create_app(settings=mock_settings)
    app.state.db_pool = mock_db_pool
    yield app


@pytest.fixture
def app_without_db(mock_settings):
    """FastAPI application started without a database."""
    from dealerhub_api.main import create_app

    yield create_app(settings=mock_settings)


@pytest.fixture
def client(app):
    """Create FastAPI test client that sends the acting dealer header."""
    with DealerTestClient(app) as test_client:
        yield test_client


@pytest.fixture
def anonymous_client(app):
    """Create FastAPI test client without the dealer header."""
    with TestClient(app) as test_client:
        yield test_client
