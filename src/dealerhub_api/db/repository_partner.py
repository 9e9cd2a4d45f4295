"""
Partner Repository

Repository for the dealer partner network, including the directory used
as the recipient picker when sharing.
"""

from typing import Any
from typing import Dict
from typing import List

import asyncpg

from dealerhub_api.db.repository_base import BOOL
from dealerhub_api.db.repository_base import TEXT
from dealerhub_api.db.repository_base import BaseRepository
from dealerhub_api.sharing.enums import PartnerStatus
from dealerhub_api.sharing.enums import TrustLevel


class PartnerRepository(BaseRepository):
    """Partner repository with directory queries."""

    columns = {
        "name": TEXT,
        "company": TEXT,
        "contact_name": TEXT,
        "email": TEXT,
        "phone": TEXT,
        "contact_email": TEXT,
        "contact_phone": TEXT,
        "location": TEXT,
        "notes": TEXT,
        "status": TEXT,
        "is_active": BOOL,
        "trust_level": TEXT,
    }
    enum_columns = {
        "status": {s.value for s in PartnerStatus},
        "trust_level": {t.value for t in TrustLevel},
    }
    filter_columns = {"status", "trust_level", "is_active"}

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "partners")

    async def list_directory(self) -> List[Dict[str, Any]]:
        """
        Get the active partners offered as share recipients.

        Returns:
            List of {id, name, contact_email, contact_phone} ordered by name
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT id, name, contact_email, contact_phone
                FROM {self.qualified_table}
                WHERE is_active = TRUE
                ORDER BY name
                """
            )
        return [self._to_dict(row) for row in rows]
