"""
API Data Access

httpx implementation of the DataAccess port. The dashboard builds one
ApiDataAccess per session and hands it to the sharing and record services.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import httpx
from loguru import logger

from dealerhub_api.dependencies import DEALER_ID_HEADER
from dealerhub_api.settings import Settings
from dealerhub_api.sharing.enums import RecordEntity
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """
    Pull a user-facing message out of an error response.

    Looks at the "message", "error" and "detail" fields in that order. FastAPI
    validation details (a list of {msg, ...}) are joined into one line.
    """
    try:
        body = response.json()
    except ValueError:
        return None

    if not isinstance(body, dict):
        return None

    for key in ("message", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, list) and value:
            messages = [item.get("msg") for item in value if isinstance(item, dict) and item.get("msg")]
            if messages:
                return "; ".join(messages)
    return None


class ApiDataAccess:
    """DataAccess over the dealer admin HTTP API."""

    def __init__(
        self,
        base_url: str,
        dealer_id: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API base URL including the /api prefix
            dealer_id: Acting dealer, sent as the X-Dealer-Id header on every request
            timeout: Timeout in seconds for each request
            transport: Optional httpx transport (tests pass an httpx.MockTransport)
        """
        self.dealer_id = dealer_id
        headers = {DEALER_ID_HEADER: dealer_id} if dealer_id else {}
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, headers=headers, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, dealer_id: Optional[str] = None) -> "ApiDataAccess":
        return cls(settings.api_base_url, dealer_id=dealer_id, timeout=settings.api_timeout_seconds)

    async def __aenter__(self) -> "ApiDataAccess":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None for empty bodies).

        Raises:
            DataAccessError: On transport errors and non-2xx responses
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("API request timed out", http_method=method, url_path=path)
            raise DataAccessError(f"Request to {path} timed out") from e
        except httpx.RequestError as e:
            logger.warning("API request failed", http_method=method, url_path=path, error=str(e))
            raise DataAccessError(f"Could not reach the server: {e}") from e

        if response.is_error:
            message = extract_error_message(response) or f"Request failed with status {response.status_code}"
            logger.warning(
                "API request rejected",
                http_method=method,
                url_path=path,
                status_code=response.status_code,
                error_message=message,
            )
            raise DataAccessError(message, status_code=response.status_code)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DataAccessError(f"Invalid response from {path}", status_code=response.status_code) from e

    def _actor_headers(self, actor: Optional[str]) -> Optional[Dict[str, str]]:
        return {DEALER_ID_HEADER: actor} if actor else None

    # Sharing

    async def submit_share(self, entity: ShareEntity, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", entity.endpoint, json=payload)

    async def fetch_share_history(self, entity: ShareEntity, dealer_id: str) -> List[Dict[str, Any]]:
        body = await self._request("GET", f"/share-history/{entity.value}", headers={DEALER_ID_HEADER: dealer_id})
        return body or []

    async def fetch_partner_directory(self) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/partners/directory")
        return body or []

    # Records

    async def list_records(self, entity: RecordEntity, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", entity.path, params=params)

    async def create_record(self, entity: RecordEntity, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", entity.path, json=fields)

    async def update_record(self, entity: RecordEntity, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"{entity.path}/{record_id}", json=fields)

    async def delete_record(self, entity: RecordEntity, record_id: str) -> None:
        await self._request("DELETE", f"{entity.path}/{record_id}")

    async def confirm_reservation(self, reservation_id: str, actor: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"{RecordEntity.RENTAL_RESERVATIONS.path}/{reservation_id}/confirm",
            headers=self._actor_headers(actor),
        )

    async def reject_reservation(
        self, reservation_id: str, actor: Optional[str] = None, comments: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"{RecordEntity.RENTAL_RESERVATIONS.path}/{reservation_id}/reject",
            json={"admin_comments": comments},
            headers=self._actor_headers(actor),
        )
