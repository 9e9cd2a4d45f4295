"""
Lead Repository

Repository for leads (cars people are looking to buy).
"""

import asyncpg

from dealerhub_api.db.repository_base import BOOL
from dealerhub_api.db.repository_base import INT
from dealerhub_api.db.repository_base import NUMERIC
from dealerhub_api.db.repository_base import TEXT
from dealerhub_api.db.repository_base import BaseRepository
from dealerhub_api.sharing.enums import LeadStatus


class LeadRepository(BaseRepository):
    """Lead repository."""

    columns = {
        "full_name": TEXT,
        "email": TEXT,
        "phone": TEXT,
        "message": TEXT,
        "make": TEXT,
        "model": TEXT,
        "fuel_type": TEXT,
        "transmission": TEXT,
        "condition": TEXT,
        "location": TEXT,
        "year_from": INT,
        "year_to": INT,
        "budget": NUMERIC,
        "contacted": BOOL,
        "status": TEXT,
    }
    enum_columns = {"status": {s.value for s in LeadStatus}}
    filter_columns = {"status", "make", "contacted"}

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "leads")
