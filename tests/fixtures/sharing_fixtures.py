"""Fixtures for the sharing core: an in-memory DataAccess and a partner directory."""

import uuid
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import pytest

from dealerhub_api.sharing.enums import RecordEntity
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.models import Partner


class FakeDataAccess:
    """
    In-memory DataAccess.

    Share submissions are stored like the server stores them: one entry per call,
    replayed when an idempotency key repeats. Set `fail_on` to a method name to
    make that method raise DataAccessError with `failure_message`.
    """

    def __init__(self, partners: Optional[List[Dict[str, Any]]] = None):
        self.partners = list(partners or [])
        self.records: Dict[RecordEntity, List[Dict[str, Any]]] = {entity: [] for entity in RecordEntity}
        self.shares: List[Dict[str, Any]] = []
        self.submitted: List[Dict[str, Any]] = []
        self.calls: List[str] = []
        self.fail_on = set()
        self.failure_message = "Failed to share offers"
        self.failure_status = 500

    def _check(self, method: str) -> None:
        self.calls.append(method)
        if method in self.fail_on:
            raise DataAccessError(self.failure_message, self.failure_status)

    async def submit_share(self, entity: ShareEntity, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._check("submit_share")
        self.submitted.append(payload)

        key = payload.get("idempotency_key")
        if key:
            for entry in self.shares:
                if entry["idempotency_key"] == key and entry["dealer_id"] == payload["dealer_id"]:
                    return {"success": True, "shared_count": len(entry["record_ids"]), "shared": entry}

        entry = {
            "id": str(uuid.uuid4()),
            "entity": entity.value,
            "dealer_id": payload["dealer_id"],
            "record_ids": list(payload[entity.ids_field]),
            "records_summary": [],
            "channels": payload["channels"],
            "shared_with_trust_levels": payload["shared_with_trust_levels"],
            "shared_with_contacts": payload["shared_with_contacts"],
            "shared_with_partner_ids": payload["shared_with_partner_ids"],
            "message": payload["message"],
            "status": "pending",
            "idempotency_key": key,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.shares.insert(0, entry)
        return {"success": True, "shared_count": len(entry["record_ids"]), "shared": entry}

    async def fetch_share_history(self, entity: ShareEntity, dealer_id: str) -> List[Dict[str, Any]]:
        self._check("fetch_share_history")
        return [e for e in self.shares if e["entity"] == entity.value and e["dealer_id"] == dealer_id]

    async def fetch_partner_directory(self) -> List[Dict[str, Any]]:
        self._check("fetch_partner_directory")
        return list(self.partners)

    async def list_records(self, entity: RecordEntity, params: Optional[Dict[str, Any]] = None) -> Any:
        self._check("list_records")
        rows = list(self.records[entity])
        if entity == RecordEntity.RENTAL_CLIENTS:
            return {"rows": rows, "paging": {"total": len(rows), "page": 1, "page_size": 20, "total_pages": 1}}
        return rows

    async def create_record(self, entity: RecordEntity, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._check("create_record")
        record = {"id": str(uuid.uuid4()), **fields}
        self.records[entity].insert(0, record)
        return record

    async def update_record(self, entity: RecordEntity, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._check("update_record")
        for index, record in enumerate(self.records[entity]):
            if record["id"] == record_id:
                self.records[entity][index] = {**record, **fields}
                return self.records[entity][index]
        raise DataAccessError(f"Record '{record_id}' not found", 404)

    async def delete_record(self, entity: RecordEntity, record_id: str) -> None:
        self._check("delete_record")
        self.records[entity] = [r for r in self.records[entity] if r["id"] != record_id]

    async def _review(self, reservation_id: str, status: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        reservations = self.records[RecordEntity.RENTAL_RESERVATIONS]
        for index, record in enumerate(reservations):
            if record["id"] == reservation_id:
                if record["status"] != "pending":
                    raise DataAccessError(f"Reservation is already {record['status']}", 409)
                reservations[index] = {**record, "status": status, **fields}
                return reservations[index]
        raise DataAccessError(f"Record '{reservation_id}' not found", 404)

    async def confirm_reservation(self, reservation_id: str, actor: Optional[str] = None) -> Dict[str, Any]:
        self._check("confirm_reservation")
        return await self._review(reservation_id, "confirmed", {"approved_by": actor})

    async def reject_reservation(
        self, reservation_id: str, actor: Optional[str] = None, comments: Optional[str] = None
    ) -> Dict[str, Any]:
        self._check("reject_reservation")
        return await self._review(reservation_id, "rejected", {"canceled_by": actor, "admin_comments": comments})


@pytest.fixture
def partner_directory():
    """Partner directory rows as returned by GET /partners/directory."""
    return [
        {"id": "p1", "name": "Alpha Autos", "contact_email": "a@x.com", "contact_phone": "+1"},
        {"id": "p2", "name": "Beta Cars", "contact_email": None, "contact_phone": "+2"},
        {"id": "p3", "name": "Gamma Garage", "contact_email": "", "contact_phone": None},
    ]


@pytest.fixture
def partners(partner_directory):
    """Partner directory as Partner models."""
    return [Partner.model_validate(row) for row in partner_directory]


@pytest.fixture
def fake_data_access(partner_directory):
    """In-memory DataAccess seeded with the partner directory."""
    return FakeDataAccess(partners=partner_directory)
