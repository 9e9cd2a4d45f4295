"""Test suite for logging setup and request context."""

import json
from unittest.mock import MagicMock
from unittest.mock import patch

from dealerhub_api.monitoring.logger import configure_logger
from dealerhub_api.monitoring.logger import get_formatted_stacktrace
from dealerhub_api.monitoring.logger import log_response_info
from dealerhub_api.monitoring.logger import process_log_record
from dealerhub_api.monitoring.request_context import redact_body
from tests.consts import API_BASE


class TestProcessLogRecord:
    """Tests for process_log_record."""

    def test_extra_serialized(self):
        """Test that extra fields are rendered as one JSON string."""
        record = {"extra": {"entity": "offers", "count": 2}, "exception": None}

        result = process_log_record(record)

        assert json.loads(result["extra"]) == {"entity": "offers", "count": 2}
        assert result["stacktrace"] == ""

    def test_exception_stacktrace_single_line(self):
        """Test that tracebacks use carriage returns instead of newlines."""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            exc_info = (type(e), e, e.__traceback__)

        record = {"extra": {}, "exception": exc_info}

        result = process_log_record(record)

        assert "RuntimeError: boom" in result["stacktrace"]
        assert "\n" not in result["stacktrace"]

    def test_get_formatted_stacktrace_keeps_newlines(self):
        """Test that newlines are kept when not replaced."""
        try:
            raise ValueError("bad")
        except ValueError as e:
            stacktrace = get_formatted_stacktrace((type(e), e, e.__traceback__), False)

        assert "\n" in stacktrace


class TestConfigureLogger:
    """Tests for configure_logger."""

    @patch("dealerhub_api.monitoring.logger.logger")
    def test_single_stdout_sink(self, mock_logger):
        """Test that default sinks are replaced by one stdout sink at the given level."""
        configure_logger(level="debug")

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()
        assert mock_logger.add.call_args.kwargs["level"] == "DEBUG"


class TestRedactBody:
    """Tests for redact_body."""

    def test_nested_redaction(self):
        """Test that sensitive keys are masked at any depth."""
        body = {"offer_ids": ["a"], "auth": {"Token": "abc"}, "items": [{"password": "x", "name": "n"}]}

        assert redact_body(body) == {
            "offer_ids": ["a"],
            "auth": {"Token": "***REDACTED***"},
            "items": [{"password": "***REDACTED***", "name": "n"}],
        }


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware through the app."""

    def test_request_id_echoed(self, client):
        """Test that a provided request id is returned."""
        response = client.get(f"{API_BASE}/health", headers={"X-Request-ID": "req-1"})

        assert response.headers["X-Request-ID"] == "req-1"

    def test_request_id_generated(self, client):
        """Test that a request id is generated when absent."""
        response = client.get(f"{API_BASE}/health")

        assert response.headers["X-Request-ID"]

    def test_request_body_stored_for_errors(self, client, mock_offer_repository):
        """Test that the parsed body is available to error handlers."""
        with patch("dealerhub_api.errors.logger") as mock_logger:
            mock_offer_repository.update_fields.side_effect = RuntimeError("unexpected")

            response = client.patch(f"{API_BASE}/offers/o1", json={"status": "New"})

        assert response.status_code == 500
        assert mock_logger.error.call_args.kwargs["request_body"] == {"status": "New"}


def test_log_record_without_extra():
    """Test that an empty extra dict is left as is."""
    record = {"extra": {}, "exception": None}

    assert process_log_record(record)["extra"] == {}


def test_log_response_info():
    """Test that log_response_info reads the status code and headers."""
    response = MagicMock()
    response.status_code = 204
    response.headers.items.return_value = [("x-request-id", "req-1")]

    with patch("dealerhub_api.monitoring.logger.logger") as mock_logger:
        log_response_info(response)

    info = mock_logger.debug.call_args.kwargs["http_response"]
    assert info == {"status_code": 204, "headers": {"x-request-id": "req-1"}}
