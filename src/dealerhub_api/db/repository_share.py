"""
Share Repository

Append-only share history: one row per share submission, holding the shared
record ids, a denormalized summary of each record, the broadcast targets and
the message.
"""

import json
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple

import asyncpg
from loguru import logger

from dealerhub_api.db.pool import SCHEMA_NAME
from dealerhub_api.db.repository_base import row_to_dict
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.enums import ShareStatus

SHARE_TABLES = {
    ShareEntity.OFFERS: "car_offer_shares",
    ShareEntity.LEADS: "lead_shares",
    ShareEntity.PARTNERS: "partner_shares",
    ShareEntity.RENTALS: "rental_shares",
}

# Record fields copied into records_summary so history stays readable after edits
SUMMARY_FIELDS = {
    ShareEntity.OFFERS: ("make", "model", "year"),
    ShareEntity.LEADS: ("make", "model", "fuel_type", "transmission", "condition", "location", "year_from", "year_to"),
    ShareEntity.PARTNERS: ("name", "company", "location"),
    ShareEntity.RENTALS: ("renter_name", "start_date", "end_date", "status"),
}

JSON_COLUMNS = {
    "record_ids",
    "records_summary",
    "channels",
    "shared_with_trust_levels",
    "shared_with_contacts",
    "shared_with_partner_ids",
}


def summarize_records(entity: ShareEntity, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Build the records_summary payload for the given record rows."""
    fields = SUMMARY_FIELDS[entity]
    return [{"id": str(record["id"]), **{field: record.get(field) for field in fields}} for record in records]


class ShareRepository:
    """Share history repository for one entity's history table."""

    def __init__(self, pool: asyncpg.Pool, entity: ShareEntity):
        self.pool = pool
        self.entity = entity
        self.table = SHARE_TABLES[entity]

    @property
    def qualified_table(self) -> str:
        return f"{SCHEMA_NAME}.{self.table}"

    def _to_entry(self, row: asyncpg.Record) -> Dict[str, Any]:
        entry = row_to_dict(row, JSON_COLUMNS)
        entry["entity"] = self.entity.value
        return entry

    async def create(
        self,
        dealer_id: Optional[str],
        records: List[Dict[str, Any]],
        channels: List[str],
        trust_levels: List[str],
        contacts: List[str],
        partner_ids: List[str],
        message: str,
        idempotency_key: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Persist one history row for a share submission.

        When idempotency_key is set and a row with the same dealer and key exists,
        that row is returned and nothing is inserted.

        Args:
            dealer_id: Acting dealer, None when the caller is anonymous
            records: Record rows being shared (only existing records)
            channels: Channel names, stored verbatim
            trust_levels: Trust level names, stored verbatim
            contacts: Resolved contacts, stored verbatim
            partner_ids: Partners selected as recipients
            message: Message attached to the share
            idempotency_key: Optional client key that makes the submission repeatable

        Returns:
            Tuple of (entry, created) where created is False for an idempotent replay
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if idempotency_key:
                    existing = await self._find_by_key(conn, dealer_id, idempotency_key)
                    if existing is not None:
                        return self._replayed(existing, dealer_id), False

                # A concurrent submit with the same key wins the unique index; no row comes back
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO {self.qualified_table} (
                        dealer_id, record_ids, records_summary, channels,
                        shared_with_trust_levels, shared_with_contacts, shared_with_partner_ids,
                        message, status, idempotency_key
                    )
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                    ON CONFLICT DO NOTHING
                    RETURNING *
                    """,
                    dealer_id,
                    json.dumps([str(record["id"]) for record in records]),
                    json.dumps(summarize_records(self.entity, records), default=str),
                    json.dumps(channels),
                    json.dumps(trust_levels),
                    json.dumps(contacts),
                    json.dumps(partner_ids),
                    message,
                    ShareStatus.PENDING.value,
                    idempotency_key,
                )

                if row is None and idempotency_key:
                    existing = await self._find_by_key(conn, dealer_id, idempotency_key)
                    if existing is not None:
                        return self._replayed(existing, dealer_id), False

        if row is None:
            raise RuntimeError(f"Share insert into {self.table} returned no row")

        logger.info(
            "Share recorded",
            table=self.table,
            share_id=str(row["id"]),
            dealer_id=dealer_id,
            record_count=len(records),
            channels=channels,
        )
        return self._to_entry(row), True

    def _replayed(self, row: asyncpg.Record, dealer_id: Optional[str]) -> Dict[str, Any]:
        logger.info(
            "Share replayed from idempotency key",
            table=self.table,
            share_id=str(row["id"]),
            dealer_id=dealer_id,
        )
        return self._to_entry(row)

    async def _find_by_key(
        self, conn: asyncpg.Connection, dealer_id: Optional[str], idempotency_key: str
    ) -> Optional[asyncpg.Record]:
        # Matches the expression in the uq_*_idempotency indexes
        return await conn.fetchrow(
            f"""
            SELECT * FROM {self.qualified_table}
            WHERE COALESCE(dealer_id, '') = COALESCE($1, '') AND idempotency_key = $2
            """,
            dealer_id,
            idempotency_key,
        )

    async def list_for_dealer(self, dealer_id: str) -> List[Dict[str, Any]]:
        """
        Get every history row created by a dealer, newest first.

        Args:
            dealer_id: Acting dealer

        Returns:
            List of history entries ordered by created_at descending
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT * FROM {self.qualified_table}
                WHERE dealer_id = $1
                ORDER BY created_at DESC
                """,
                dealer_id,
            )
        return [self._to_entry(row) for row in rows]
