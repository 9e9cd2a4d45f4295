"""
Base Repository

Base class providing the CRUD operations shared by every record table.
Concrete repositories declare their table, editable columns, enumerated
columns and filters, and add entity-specific queries.
"""

import json
from datetime import date
from decimal import Decimal
from decimal import InvalidOperation
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Set
from uuid import UUID

import asyncpg
from loguru import logger

from dealerhub_api.db.errors import InvalidFieldError
from dealerhub_api.db.errors import RecordNotFoundError
from dealerhub_api.db.pool import SCHEMA_NAME

# Column types understood by _coerce_value
TEXT = "text"
INT = "int"
NUMERIC = "numeric"
BOOL = "bool"
DATE = "date"
JSON = "json"


def parse_uuid(value: Any) -> Optional[UUID]:
    """Parse an id into a UUID, returning None for anything that is not one."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def row_to_dict(row: asyncpg.Record, json_columns: Set[str] = frozenset()) -> Dict[str, Any]:
    """
    Convert an asyncpg record into a plain dict.

    UUIDs become strings and JSONB columns (returned by asyncpg as text) are decoded.
    """
    result = dict(row)
    for key, value in result.items():
        if isinstance(value, UUID):
            result[key] = str(value)
        elif key in json_columns and isinstance(value, str):
            result[key] = json.loads(value)
    return result


class BaseRepository:
    """
    Base repository with common CRUD operations.

    All record repositories (OfferRepository, LeadRepository, ...) inherit from this.
    """

    # Editable column name -> column type
    columns: Dict[str, str] = {}
    # Enumerated column name -> allowed values
    enum_columns: Dict[str, Set[str]] = {}
    # Columns accepted as equality filters by list()
    filter_columns: Set[str] = set()
    order_by: str = "created_at DESC"

    def __init__(self, pool: asyncpg.Pool, table_name: str):
        """
        Initialize base repository.

        Args:
            pool: asyncpg connection pool
            table_name: Database table name (without schema prefix)
        """
        self.pool = pool
        self.table = table_name

    @property
    def qualified_table(self) -> str:
        return f"{SCHEMA_NAME}.{self.table}"

    @property
    def json_columns(self) -> Set[str]:
        return {name for name, kind in self.columns.items() if kind == JSON}

    def _to_dict(self, row: asyncpg.Record) -> Dict[str, Any]:
        return row_to_dict(row, self.json_columns)

    async def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List rows, optionally filtered by equality on whitelisted columns.

        Args:
            filters: Column -> value; None values are ignored

        Returns:
            List of dicts ordered by the repository's default order
        """
        clauses = []
        params: List[Any] = []
        for field, value in (filters or {}).items():
            if value is None:
                continue
            if field not in self.filter_columns:
                raise InvalidFieldError(field, f"Cannot filter {self.table} by '{field}'")
            params.append(self._coerce_value(field, value))
            clauses.append(f"{field} = ${len(params)}")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        query = f"SELECT * FROM {self.qualified_table} {where} ORDER BY {self.order_by}"

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *params)
        return [self._to_dict(row) for row in rows]

    async def get(self, record_id: str) -> Dict[str, Any]:
        """
        Get one row by id.

        Raises:
            RecordNotFoundError: If no row has this id
        """
        uuid_id = parse_uuid(record_id)
        if uuid_id is None:
            raise RecordNotFoundError(self.table, record_id)

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT * FROM {self.qualified_table} WHERE id = $1", uuid_id)
        if row is None:
            raise RecordNotFoundError(self.table, record_id)
        return self._to_dict(row)

    async def get_many(self, record_ids: List[str]) -> List[Dict[str, Any]]:
        """
        Get the rows whose ids are in record_ids, in the order the ids were given.

        Ids that are malformed or have no row are skipped.
        """
        uuid_ids = [parsed for parsed in (parse_uuid(rid) for rid in record_ids) if parsed is not None]
        if not uuid_ids:
            return []

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"SELECT * FROM {self.qualified_table} WHERE id = ANY($1::uuid[])", uuid_ids)

        by_id = {str(row["id"]): self._to_dict(row) for row in rows}
        return [by_id[str(uuid_id)] for uuid_id in uuid_ids if str(uuid_id) in by_id]

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a row from editable fields.

        Args:
            fields: Column -> value; every key must be an editable column

        Returns:
            The inserted row
        """
        names = []
        params: List[Any] = []
        for field, value in fields.items():
            names.append(field)
            params.append(self._coerce_value(field, value))

        placeholders = ", ".join(f"${i}" for i in range(1, len(params) + 1))
        query = f"INSERT INTO {self.qualified_table} ({', '.join(names)}) VALUES ({placeholders}) RETURNING *"

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *params)

        logger.info(f"Created {self.table} record", table=self.table, record_id=str(row["id"]))
        return self._to_dict(row)

    async def update_fields(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update one or more editable fields of a row.

        Args:
            record_id: Row id
            fields: Column -> new value

        Returns:
            The updated row

        Raises:
            InvalidFieldError: If a field is not editable or its value is invalid
            RecordNotFoundError: If no row has this id
        """
        if not fields:
            raise InvalidFieldError("", "No fields to update")

        uuid_id = parse_uuid(record_id)
        if uuid_id is None:
            raise RecordNotFoundError(self.table, record_id)

        assignments = []
        params: List[Any] = [uuid_id]
        for field, value in fields.items():
            params.append(self._coerce_value(field, value))
            assignments.append(f"{field} = ${len(params)}")

        query = (
            f"UPDATE {self.qualified_table} SET {', '.join(assignments)}, updated_at = NOW() "
            f"WHERE id = $1 RETURNING *"
        )
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *params)

        if row is None:
            raise RecordNotFoundError(self.table, record_id)

        logger.info(
            f"Updated {self.table} record",
            table=self.table,
            record_id=record_id,
            fields=sorted(fields),
        )
        return self._to_dict(row)

    async def delete(self, record_id: str) -> None:
        """
        Delete a row by id.

        Raises:
            RecordNotFoundError: If no row has this id
        """
        uuid_id = parse_uuid(record_id)
        if uuid_id is None:
            raise RecordNotFoundError(self.table, record_id)

        async with self.pool.acquire() as conn:
            deleted_id = await conn.fetchval(f"DELETE FROM {self.qualified_table} WHERE id = $1 RETURNING id", uuid_id)

        if deleted_id is None:
            raise RecordNotFoundError(self.table, record_id)

        logger.info(f"Deleted {self.table} record", table=self.table, record_id=record_id)

    def _coerce_value(self, field: str, value: Any) -> Any:
        """
        Validate a value against the column's declared type and enumerated set.

        Raises:
            InvalidFieldError: If the field is unknown or the value does not fit
        """
        kind = self.columns.get(field)
        if kind is None:
            raise InvalidFieldError(field, f"Field '{field}' is not editable on {self.table}")

        allowed = self.enum_columns.get(field)
        if allowed is not None and (not (value is None or isinstance(value, str)) or value not in allowed):
            raise InvalidFieldError(
                field,
                f"Invalid value '{value}' for {field}. Allowed: {', '.join(sorted(allowed))}",
            )

        if value is None:
            return None

        try:
            if kind == INT:
                if isinstance(value, bool):
                    raise ValueError("boolean is not an integer")
                return int(value)
            if kind == NUMERIC:
                return Decimal(str(value))
            if kind == BOOL:
                if not isinstance(value, bool):
                    raise ValueError("expected true or false")
                return value
            if kind == DATE:
                return value if isinstance(value, date) else date.fromisoformat(str(value))
            if kind == JSON:
                return json.dumps(value)
        except (TypeError, ValueError, InvalidOperation) as e:
            raise InvalidFieldError(field, f"Invalid value for {field}: {e}") from e

        return str(value)
