"""
Offer Repository

Repository for car offers (cars people want to sell to the dealer network).
"""

import asyncpg

from dealerhub_api.db.repository_base import BOOL
from dealerhub_api.db.repository_base import INT
from dealerhub_api.db.repository_base import NUMERIC
from dealerhub_api.db.repository_base import TEXT
from dealerhub_api.db.repository_base import BaseRepository
from dealerhub_api.sharing.enums import OfferStatus


class OfferRepository(BaseRepository):
    """Car offer repository."""

    columns = {
        "full_name": TEXT,
        "email": TEXT,
        "phone": TEXT,
        "make": TEXT,
        "model": TEXT,
        "year": INT,
        "mileage": INT,
        "fuel_type": TEXT,
        "transmission": TEXT,
        "condition": TEXT,
        "city": TEXT,
        "asking_price": NUMERIC,
        "contacted": BOOL,
        "description": TEXT,
        "status": TEXT,
    }
    enum_columns = {"status": {s.value for s in OfferStatus}}
    filter_columns = {"status", "make", "contacted"}

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "car_offers")
