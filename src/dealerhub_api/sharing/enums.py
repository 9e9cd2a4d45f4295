"""
Sharing and Record Enums

Enum types used by the sharing core, the repositories and the API schemas.
Values must match the CHECK constraints in db/schema.sql.
"""

from enum import Enum

# ════════════════════════════════════════════════════════════════════════════
# Broadcast Targets
# ════════════════════════════════════════════════════════════════════════════


class Channel(str, Enum):
    """Delivery media a share can be broadcast on."""

    WHATSAPP = "WhatsApp"
    EMAIL = "Email"
    SLACK = "Slack"
    TELEGRAM = "Telegram"
    SMS = "SMS"


class TrustLevel(str, Enum):
    """Partner trust categories, also used as a broadcast criterion."""

    TRUSTED = "trusted"
    VERIFIED = "verified"
    FLAGGED = "flagged"
    UNRATED = "unrated"


# ════════════════════════════════════════════════════════════════════════════
# Entities
# ════════════════════════════════════════════════════════════════════════════


class ShareEntity(str, Enum):
    """Record families that can be shared with the partner network."""

    OFFERS = "offers"
    LEADS = "leads"
    PARTNERS = "partners"
    RENTALS = "rentals"

    @property
    def endpoint(self) -> str:
        """Path of the share submission endpoint (relative to the API base)."""
        return SHARE_ENDPOINTS[self]

    @property
    def ids_field(self) -> str:
        """Name of the record id list in the submission body."""
        return SHARE_IDS_FIELDS[self]

    @property
    def default_message(self) -> str:
        """Message attached to shares created from the dashboard."""
        return f"Check out these {self.value}."


SHARE_ENDPOINTS = {
    ShareEntity.OFFERS: "/share-offers",
    ShareEntity.LEADS: "/share-leads",
    ShareEntity.PARTNERS: "/partner-shares",
    ShareEntity.RENTALS: "/share-rentals",
}

SHARE_IDS_FIELDS = {
    ShareEntity.OFFERS: "offer_ids",
    ShareEntity.LEADS: "lead_ids",
    ShareEntity.PARTNERS: "partner_ids",
    ShareEntity.RENTALS: "rental_ids",
}


class RecordEntity(str, Enum):
    """Record families with CRUD screens."""

    OFFERS = "offers"
    LEADS = "leads"
    PARTNERS = "partners"
    RENTAL_RESERVATIONS = "rentals/reservations"
    RENTAL_CLIENTS = "rentals/clients"

    @property
    def path(self) -> str:
        """Collection path relative to the API base."""
        return f"/{self.value}"


# ════════════════════════════════════════════════════════════════════════════
# Status Sets
# ════════════════════════════════════════════════════════════════════════════


class OfferStatus(str, Enum):
    """Car offer review status."""

    NEW = "New"
    IN_REVIEW = "In Review"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class LeadStatus(str, Enum):
    """Lead pipeline status."""

    NEW = "New"
    IN_REVIEW = "In Review"
    CLOSED = "Closed"


class PartnerStatus(str, Enum):
    """Partner onboarding status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class ReservationStatus(str, Enum):
    """Rental reservation lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELED = "canceled"


class ClientStatus(str, Enum):
    """Rental client status."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    PENDING = "Pending"
    VIP = "VIP"


class ShareStatus(str, Enum):
    """Delivery status of a share history entry."""

    PENDING = "pending"
