"""
Record Services

List, edit, delete and search for the CRUD screens (offers, leads, partners,
rental reservations, rental clients). Each service keeps the last fetched
list as a local cache that the screen renders from.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from loguru import logger

from dealerhub_api.sharing.edits import FieldEdit
from dealerhub_api.sharing.enums import RecordEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.models import FetchResult
from dealerhub_api.sharing.models import RecordResult
from dealerhub_api.sharing.ports import DataAccess

# Fields matched by search(), per entity
SEARCH_FIELDS = {
    RecordEntity.OFFERS: ("full_name", "email", "phone", "make", "model", "city", "status"),
    RecordEntity.LEADS: ("full_name", "email", "phone", "make", "model", "location", "status"),
    RecordEntity.PARTNERS: ("name", "company", "contact_name", "email", "location", "trust_level", "status"),
    RecordEntity.RENTAL_RESERVATIONS: ("renter_name", "renter_email", "renter_phone", "listing_id", "status"),
    RecordEntity.RENTAL_CLIENTS: ("name", "email", "phone", "city", "status"),
}


class RecordService:
    """CRUD operations for one record entity, backed by a DataAccess implementation."""

    def __init__(self, data_access: DataAccess, entity: RecordEntity):
        self.data_access = data_access
        self.entity = entity
        self.records: List[Dict[str, Any]] = []

    async def list(self, filters: Optional[Dict[str, Any]] = None) -> FetchResult:
        """
        Fetch the collection and replace the local cache.

        On failure the cache is emptied and the result carries an error for the banner.
        """
        try:
            body = await self.data_access.list_records(self.entity, filters)
        except DataAccessError as e:
            logger.error(f"Failed to fetch {self.entity.value}", entity=self.entity.value, error=e.message)
            self.records = []
            return FetchResult(error=e.message or f"Failed to fetch {self.entity.value}")

        paging = None
        if isinstance(body, dict):
            paging = body.get("paging")
            body = body.get("rows", [])

        self.records = list(body or [])
        return FetchResult(records=self.records, paging=paging)

    async def update_field(self, record_id: str, field: str, value: Any) -> FieldEdit:
        """
        Edit one field with one round-trip.

        The cached record shows the new value while the request is in flight. On
        failure the previous value is restored and the returned edit carries the error.
        """
        index = self._index_of(record_id)
        current = self.records[index] if index is not None else {"id": record_id}
        edit = FieldEdit.begin(current, field, value)
        self._replace(index, edit.apply(current))

        try:
            updated = await self.data_access.update_record(self.entity, record_id, {field: value})
        except DataAccessError as e:
            edit = edit.rollback(e.message or f"Failed to update {field}")
            logger.warning(
                "Field update rolled back",
                entity=self.entity.value,
                record_id=record_id,
                field=field,
                error=edit.error,
            )
            self._replace(self._index_of(record_id), edit.apply(self._cached(record_id, current)))
            return edit

        edit = edit.commit()
        self._replace(self._index_of(record_id), updated or edit.apply(current))
        return edit

    async def create(self, fields: Dict[str, Any]) -> RecordResult:
        """Create a record and add it to the top of the cache."""
        try:
            created = await self.data_access.create_record(self.entity, fields)
        except DataAccessError as e:
            logger.warning("Record creation failed", entity=self.entity.value, error=e.message)
            return RecordResult(ok=False, error=e.message or f"Failed to create {self.entity.value}")

        self.records = [created] + self.records
        return RecordResult(ok=True, record=created)

    async def remove(self, record_id: str) -> RecordResult:
        """Delete a record and drop it from the cache."""
        try:
            await self.data_access.delete_record(self.entity, record_id)
        except DataAccessError as e:
            logger.warning("Record deletion failed", entity=self.entity.value, record_id=record_id, error=e.message)
            return RecordResult(ok=False, error=e.message or f"Failed to delete {self.entity.value}")

        self.records = [record for record in self.records if str(record.get("id")) != record_id]
        return RecordResult(ok=True)

    async def confirm(self, reservation_id: str, actor: Optional[str] = None) -> RecordResult:
        """Confirm a pending rental reservation."""
        self._require_reservations()
        try:
            updated = await self.data_access.confirm_reservation(reservation_id, actor)
        except DataAccessError as e:
            return RecordResult(ok=False, error=e.message or "Failed to confirm reservation")
        self._replace(self._index_of(reservation_id), updated)
        return RecordResult(ok=True, record=updated)

    async def reject(self, reservation_id: str, actor: Optional[str] = None, comments: Optional[str] = None) -> RecordResult:
        """Reject a pending rental reservation with an optional comment for the renter."""
        self._require_reservations()
        try:
            updated = await self.data_access.reject_reservation(reservation_id, actor, comments)
        except DataAccessError as e:
            return RecordResult(ok=False, error=e.message or "Failed to reject reservation")
        self._replace(self._index_of(reservation_id), updated)
        return RecordResult(ok=True, record=updated)

    def search(self, query: Optional[str]) -> List[Dict[str, Any]]:
        """Case-insensitive substring search over the cached records."""
        if not query or not query.strip():
            return list(self.records)
        needle = query.strip().lower()
        fields = SEARCH_FIELDS[self.entity]
        return [
            record
            for record in self.records
            if any(needle in str(record.get(field) or "").lower() for field in fields)
        ]

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self.records):
            if str(record.get("id")) == record_id:
                return index
        return None

    def _cached(self, record_id: str, default: Dict[str, Any]) -> Dict[str, Any]:
        index = self._index_of(record_id)
        return self.records[index] if index is not None else default

    def _replace(self, index: Optional[int], record: Dict[str, Any]) -> None:
        if index is not None:
            self.records[index] = record

    def _require_reservations(self) -> None:
        if self.entity != RecordEntity.RENTAL_RESERVATIONS:
            raise ValueError(f"{self.entity.value} records cannot be confirmed or rejected")
