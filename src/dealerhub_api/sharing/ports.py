"""
Data access port for the sharing core.

The sharing services never talk to storage directly; they receive an object
implementing DataAccess. ApiDataAccess (dealerhub_api.client) implements it over
the HTTP API. Every method raises DataAccessError on failure.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Protocol

from dealerhub_api.sharing.enums import RecordEntity
from dealerhub_api.sharing.enums import ShareEntity


class DataAccess(Protocol):
    """Storage interface used by the sharing and record services."""

    async def submit_share(self, entity: ShareEntity, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Post a share submission and return the response body."""
        ...

    async def fetch_share_history(self, entity: ShareEntity, dealer_id: str) -> List[Dict[str, Any]]:
        """Get the dealer's share history for an entity, newest first."""
        ...

    async def fetch_partner_directory(self) -> List[Dict[str, Any]]:
        """Get active partners ordered by name."""
        ...

    async def list_records(self, entity: RecordEntity, params: Optional[Dict[str, Any]] = None) -> Any:
        """Get a record collection; paginated collections return {rows, paging}."""
        ...

    async def create_record(self, entity: RecordEntity, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a record and return it."""
        ...

    async def update_record(self, entity: RecordEntity, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Update fields of a record and return the updated record."""
        ...

    async def delete_record(self, entity: RecordEntity, record_id: str) -> None:
        """Delete a record."""
        ...

    async def confirm_reservation(self, reservation_id: str, actor: Optional[str] = None) -> Dict[str, Any]:
        """Confirm a pending rental reservation on behalf of actor."""
        ...

    async def reject_reservation(
        self, reservation_id: str, actor: Optional[str] = None, comments: Optional[str] = None
    ) -> Dict[str, Any]:
        """Reject a pending rental reservation on behalf of actor."""
        ...
