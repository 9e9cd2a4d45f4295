"""Unit tests for the httpx DataAccess implementation."""

import json

import httpx
import pytest

from dealerhub_api.client.api_client import ApiDataAccess
from dealerhub_api.client.api_client import extract_error_message
from dealerhub_api.settings import Settings
from dealerhub_api.sharing.enums import RecordEntity
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.models import ShareSuccess
from dealerhub_api.sharing.workflow import ShareWorkflow

BASE_URL = "http://dealerhub.test/api"


def _client(handler, dealer_id="dealer-42"):
    return ApiDataAccess(BASE_URL, dealer_id=dealer_id, transport=httpx.MockTransport(handler))


class TestExtractErrorMessage:
    """Tests for extract_error_message."""

    @pytest.mark.parametrize(
        "body,expected",
        [
            ({"message": "Failed to share offers"}, "Failed to share offers"),
            ({"error": "Bad things"}, "Bad things"),
            ({"detail": "Database is not configured"}, "Database is not configured"),
            ({"detail": [{"msg": "field required"}, {"msg": "bad email"}]}, "field required; bad email"),
            ({"other": 1}, None),
            ([1, 2], None),
        ],
        ids=["message", "error", "detail_string", "detail_list", "unknown_keys", "not_a_dict"],
    )
    def test_json_bodies(self, body, expected):
        """Test message extraction from JSON error bodies."""
        response = httpx.Response(400, json=body)

        assert extract_error_message(response) == expected

    def test_non_json_body(self):
        """Test that a plain-text body yields None."""
        assert extract_error_message(httpx.Response(502, text="Bad Gateway")) is None


class TestRequests:
    """Tests for the requests ApiDataAccess sends."""

    @pytest.mark.asyncio
    async def test_submit_share(self):
        """Test that a share goes to the entity endpoint with the dealer header."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["dealer"] = request.headers.get("X-Dealer-Id")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "shared_count": 1})

        async with _client(handler) as client:
            body = await client.submit_share(ShareEntity.PARTNERS, {"partner_ids": ["p1"]})

        assert body == {"success": True, "shared_count": 1}
        assert seen == {"path": "/api/partner-shares", "dealer": "dealer-42", "body": {"partner_ids": ["p1"]}}

    @pytest.mark.asyncio
    async def test_history_sends_dealer_header(self):
        """Test that history is requested for the given dealer."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["dealer"] = request.headers.get("X-Dealer-Id")
            return httpx.Response(200, json=[])

        async with _client(handler, dealer_id=None) as client:
            history = await client.fetch_share_history(ShareEntity.LEADS, "dealer-7")

        assert history == []
        assert seen == {"path": "/api/share-history/leads", "dealer": "dealer-7"}

    @pytest.mark.asyncio
    async def test_list_drops_none_params(self):
        """Test that unset filters are not sent."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"rows": [], "paging": {"total": 0}})

        async with _client(handler) as client:
            await client.list_records(RecordEntity.RENTAL_CLIENTS, {"page": 2, "search": None, "status": "VIP"})

        assert seen == {"path": "/api/rentals/clients", "params": {"page": "2", "status": "VIP"}}

    @pytest.mark.asyncio
    async def test_update_and_delete_paths(self):
        """Test PATCH and DELETE record paths and an empty 204 body."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            if request.method == "DELETE":
                return httpx.Response(204)
            return httpx.Response(200, json={"id": "l1", "status": "Closed"})

        async with _client(handler) as client:
            updated = await client.update_record(RecordEntity.LEADS, "l1", {"status": "Closed"})
            deleted = await client.delete_record(RecordEntity.LEADS, "l1")

        assert updated == {"id": "l1", "status": "Closed"}
        assert deleted is None
        assert seen == [("PATCH", "/api/leads/l1"), ("DELETE", "/api/leads/l1")]

    @pytest.mark.asyncio
    async def test_reject_reservation(self):
        """Test that the reject comment and actor are sent."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["actor"] = request.headers.get("X-Dealer-Id")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "r1", "status": "rejected"})

        async with _client(handler, dealer_id=None) as client:
            await client.reject_reservation("r1", actor="admin-1", comments="Overbooked")

        assert seen == {
            "path": "/api/rentals/reservations/r1/reject",
            "actor": "admin-1",
            "body": {"admin_comments": "Overbooked"},
        }

    def test_from_settings(self):
        """Test construction from settings."""
        settings = Settings(api_base_url=BASE_URL, api_timeout_seconds=3.0, database_url=None)

        client = ApiDataAccess.from_settings(settings, dealer_id="dealer-42")

        assert client.dealer_id == "dealer-42"
        assert str(client._client.base_url).startswith(BASE_URL)
        assert client._client.timeout.read == 3.0


class TestErrors:
    """Tests for failures surfaced as DataAccessError."""

    @pytest.mark.asyncio
    async def test_error_status_carries_server_message(self):
        """Test that the server's message and status are kept."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "No valid offers to share"})

        async with _client(handler) as client:
            with pytest.raises(DataAccessError) as exc_info:
                await client.submit_share(ShareEntity.OFFERS, {"offer_ids": ["x"]})

        assert exc_info.value.message == "No valid offers to share"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_error_without_message(self):
        """Test the generic message for bodies without a message."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        async with _client(handler) as client:
            with pytest.raises(DataAccessError) as exc_info:
                await client.fetch_partner_directory()

        assert exc_info.value.message == "Request failed with status 502"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test that connection failures have no status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(DataAccessError) as exc_info:
                await client.list_records(RecordEntity.OFFERS)

        assert exc_info.value.status_code is None
        assert "Could not reach the server" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test that timeouts become DataAccessError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        async with _client(handler) as client:
            with pytest.raises(DataAccessError) as exc_info:
                await client.list_records(RecordEntity.LEADS)

        assert "timed out" in exc_info.value.message


class TestAgainstApp:
    """Tests running the sharing workflow against the FastAPI app in-process."""

    @pytest.mark.asyncio
    async def test_share_offers_end_to_end(self, app, mock_share_repositories, sample_offer):
        """Test a dashboard share through ApiDataAccess, the route and the mocked repositories."""
        transport = httpx.ASGITransport(app=app)
        async with ApiDataAccess("http://testserver/api", dealer_id="dealer-42", transport=transport) as client:
            workflow = ShareWorkflow(client, ShareEntity.OFFERS, "dealer-42")
            workflow.selection = workflow.selection.toggle_one(sample_offer["id"], True)

            result = await workflow.share(channels=["WhatsApp", "Email"], trust_levels=["trusted"], manual_contacts_raw="+41001,  ")

        assert isinstance(result, ShareSuccess)
        assert result.shared_count == 1
        assert len(workflow.selection) == 0
        assert len(workflow.history) == 1
        create_kwargs = mock_share_repositories["shares"].create.call_args.kwargs
        assert create_kwargs["contacts"] == ["+41001"]
        assert create_kwargs["channels"] == ["WhatsApp", "Email"]
        assert create_kwargs["dealer_id"] == "dealer-42"
