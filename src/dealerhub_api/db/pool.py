"""
Dealer Database Connection Pool

Manages the asyncpg connection pool for the dealer back office database.
Creates the dealerhub schema from schema.sql on first start.

Schema Evolution:
-----------------
When adding/removing tables in schema.sql:
1. Update schema.sql with the new DDL
2. Update DealerDBPool.EXPECTED_TABLES with the new table names
3. For existing deployments, drop and recreate the schema:
   DROP SCHEMA dealerhub CASCADE;
   (then restart the app to auto-create)
"""

from pathlib import Path
from typing import Dict
from typing import Optional

import asyncpg
from loguru import logger

SCHEMA_NAME = "dealerhub"


class DealerDBPool:
    """Dealer database connection pool manager."""

    # Tables in the dealerhub schema; keep in sync with schema.sql
    EXPECTED_TABLES = {
        "car_offers",
        "leads",
        "partners",
        "rental_reservations",
        "rental_clients",
        "car_offer_shares",
        "lead_shares",
        "partner_shares",
        "rental_shares",
    }

    def __init__(
        self,
        connection_string: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ):
        """
        Initialize dealer DB pool.

        Args:
            connection_string: PostgreSQL connection string
            min_size: Minimum pooled connections
            max_size: Maximum pooled connections
            command_timeout: Per-query timeout in seconds
        """
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.pool: Optional[asyncpg.Pool] = None

    async def initialize(self) -> None:
        """Create the connection pool and bootstrap the schema if it is missing."""
        if self.pool is not None:
            logger.debug("Dealer DB pool already initialized")
            return

        try:
            logger.info("Initializing dealer database pool", min_size=self.min_size, max_size=self.max_size)

            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
            )

            await self._bootstrap_schema()
            logger.success("Dealer database initialized successfully")

        except (OSError, asyncpg.PostgresError, RuntimeError) as e:
            logger.error(f"Failed to initialize dealer DB pool: {e}", exc_info=True)
            if self.pool:
                await self.pool.close()
                self.pool = None
            raise

    async def _bootstrap_schema(self) -> None:
        """
        Execute schema.sql when the dealerhub schema is absent or incomplete.

        All statements in schema.sql are idempotent (IF NOT EXISTS), so a partial
        schema is completed rather than rejected.
        """
        async with self.pool.acquire() as conn:
            existing_tables = await self._existing_tables(conn)
            if existing_tables >= self.EXPECTED_TABLES:
                logger.info(f"Dealerhub schema present with {len(existing_tables)} tables")
                return

            missing_tables = self.EXPECTED_TABLES - existing_tables
            logger.info("Creating dealerhub schema objects", missing_tables=sorted(missing_tables))

            schema_path = Path(__file__).parent / "schema.sql"
            if not schema_path.exists():
                raise RuntimeError(f"schema.sql not found at {schema_path}")

            await conn.execute(schema_path.read_text())

            existing_tables = await self._existing_tables(conn)
            still_missing = self.EXPECTED_TABLES - existing_tables
            if still_missing:
                raise RuntimeError(f"Schema bootstrap incomplete, missing tables: {sorted(still_missing)}")

            logger.success(f"All {len(self.EXPECTED_TABLES)} dealerhub tables verified")

    @staticmethod
    async def _existing_tables(conn: asyncpg.Connection) -> set:
        rows = await conn.fetch(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = $1
            """,
            SCHEMA_NAME,
        )
        return {row["table_name"] for row in rows}

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self.pool:
            logger.info("Closing dealer database pool")
            await self.pool.close()
            self.pool = None

    async def health_check(self) -> bool:
        """
        Check if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        if not self.pool:
            return False

        try:
            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Dealer DB health check failed: {e}")
            return False

    async def get_table_counts(self) -> Dict[str, int]:
        """Row counts for every table in the dealerhub schema."""
        async with self.pool.acquire() as conn:
            counts = {}
            for table_name in sorted(await self._existing_tables(conn)):
                counts[table_name] = await conn.fetchval(f"SELECT COUNT(*) FROM {SCHEMA_NAME}.{table_name}")
            return counts
