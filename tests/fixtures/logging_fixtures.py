"""Fixtures for logging mocks."""

from unittest.mock import patch

import pytest


@pytest.fixture
def mock_logger():
    """Mock loguru logger in the share and sharing-core modules."""
    with patch("dealerhub_api.routes.routes_share.logger") as mock_share_logger, patch(
        "dealerhub_api.sharing.history.logger"
    ) as mock_history_logger:
        yield {"share": mock_share_logger, "history": mock_history_logger}
