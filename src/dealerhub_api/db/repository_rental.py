"""
Rental Repositories

Repositories for rental reservations (with the confirm/reject review flow)
and rental clients (with server-side pagination).
"""

import math
from typing import Any
from typing import Dict
from typing import Optional

import asyncpg
from loguru import logger

from dealerhub_api.db.errors import InvalidFieldError
from dealerhub_api.db.errors import InvalidStateError
from dealerhub_api.db.errors import RecordNotFoundError
from dealerhub_api.db.repository_base import DATE
from dealerhub_api.db.repository_base import JSON
from dealerhub_api.db.repository_base import NUMERIC
from dealerhub_api.db.repository_base import TEXT
from dealerhub_api.db.repository_base import BaseRepository
from dealerhub_api.db.repository_base import parse_uuid
from dealerhub_api.sharing.enums import ClientStatus
from dealerhub_api.sharing.enums import ReservationStatus


class RentalReservationRepository(BaseRepository):
    """Rental reservation repository with review transitions."""

    columns = {
        "listing_id": TEXT,
        "renter_name": TEXT,
        "renter_email": TEXT,
        "renter_phone": TEXT,
        "start_date": DATE,
        "end_date": DATE,
        "total_price": NUMERIC,
        "currency": TEXT,
        "notes": TEXT,
        "admin_comments": TEXT,
        "status": TEXT,
    }
    enum_columns = {"status": {s.value for s in ReservationStatus}}
    filter_columns = {"status", "listing_id"}

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "rental_reservations")

    async def confirm(self, reservation_id: str, actor: Optional[str]) -> Dict[str, Any]:
        """
        Confirm a pending reservation.

        Args:
            reservation_id: Reservation id
            actor: Dealer or admin approving the reservation

        Raises:
            RecordNotFoundError: If the reservation does not exist
            InvalidStateError: If the reservation is not pending
        """
        return await self._review(
            reservation_id,
            action="confirm",
            assignments="status = $2, approved_by = $3, approved_at = NOW()",
            params=[ReservationStatus.CONFIRMED.value, actor],
        )

    async def reject(self, reservation_id: str, actor: Optional[str], comments: Optional[str]) -> Dict[str, Any]:
        """
        Reject a pending reservation, recording who rejected it and why.

        Args:
            reservation_id: Reservation id
            actor: Dealer or admin rejecting the reservation
            comments: Reason shown to the renter, stored in admin_comments

        Raises:
            RecordNotFoundError: If the reservation does not exist
            InvalidStateError: If the reservation is not pending
        """
        return await self._review(
            reservation_id,
            action="reject",
            assignments="status = $2, canceled_by = $3, canceled_at = NOW(), admin_comments = $4",
            params=[ReservationStatus.REJECTED.value, actor, comments],
        )

    async def _review(self, reservation_id: str, action: str, assignments: str, params: list) -> Dict[str, Any]:
        uuid_id = parse_uuid(reservation_id)
        if uuid_id is None:
            raise RecordNotFoundError(self.table, reservation_id)

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                current = await conn.fetchval(
                    f"SELECT status FROM {self.qualified_table} WHERE id = $1 FOR UPDATE",
                    uuid_id,
                )
                if current is None:
                    raise RecordNotFoundError(self.table, reservation_id)
                if current != ReservationStatus.PENDING.value:
                    raise InvalidStateError(reservation_id, current, action)

                row = await conn.fetchrow(
                    f"UPDATE {self.qualified_table} SET {assignments}, updated_at = NOW() WHERE id = $1 RETURNING *",
                    uuid_id,
                    *params,
                )

        logger.info(f"Reservation {action}ed", reservation_id=reservation_id, actor=params[1])
        return self._to_dict(row)


class RentalClientRepository(BaseRepository):
    """Rental client repository with paginated search."""

    columns = {
        "name": TEXT,
        "email": TEXT,
        "phone": TEXT,
        "city": TEXT,
        "preferred_contact": TEXT,
        "status": TEXT,
        "tags": JSON,
        "notes": TEXT,
    }
    enum_columns = {"status": {s.value for s in ClientStatus}}
    filter_columns = {"status", "city"}
    sort_columns = {"name", "email", "city", "status", "created_at"}
    search_columns = ("name", "email", "phone", "city")

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "rental_clients")

    async def list_page(
        self,
        page: int = 1,
        page_size: int = 20,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Dict[str, Any]:
        """
        Get one page of clients.

        Args:
            page: 1-based page number
            page_size: Rows per page
            search: Case-insensitive substring matched against name, email, phone and city
            status: Exact status filter
            sort_by: Sort column (name, email, city, status or created_at)
            sort_dir: "asc" or "desc"

        Returns:
            {"rows": [...], "paging": {"total", "page", "page_size", "total_pages"}}
        """
        if sort_by not in self.sort_columns:
            raise InvalidFieldError(sort_by, f"Cannot sort {self.table} by '{sort_by}'")
        direction = "ASC" if sort_dir.lower() == "asc" else "DESC"

        clauses = []
        params: list = []
        if status:
            params.append(self._coerce_value("status", status))
            clauses.append(f"status = ${len(params)}")
        if search and search.strip():
            params.append(f"%{search.strip()}%")
            matches = " OR ".join(f"{column} ILIKE ${len(params)}" for column in self.search_columns)
            clauses.append(f"({matches})")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        offset = (page - 1) * page_size
        async with self.pool.acquire() as conn:
            total = await conn.fetchval(f"SELECT COUNT(*) FROM {self.qualified_table} {where}", *params)
            rows = await conn.fetch(
                f"""
                SELECT * FROM {self.qualified_table} {where}
                ORDER BY {sort_by} {direction}, id
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                """,
                *params,
                page_size,
                offset,
            )

        return {
            "rows": [self._to_dict(row) for row in rows],
            "paging": {
                "total": total,
                "page": page,
                "page_size": page_size,
                "total_pages": math.ceil(total / page_size) if total else 0,
            },
        }
