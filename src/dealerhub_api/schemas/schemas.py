####################################
# --- Request/response schemas --- #
####################################

import re
from datetime import datetime
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from dealerhub_api.sharing.enums import PartnerStatus
from dealerhub_api.sharing.enums import TrustLevel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# share (Create)
class ShareSubmissionRequest(BaseModel):
    """
    Request body accepted by every share endpoint.

    Only the id list matching the endpoint's entity is read
    (offer_ids, lead_ids, partner_ids or rental_ids).
    """

    offer_ids: Optional[List[str]] = None
    lead_ids: Optional[List[str]] = None
    partner_ids: Optional[List[str]] = None
    rental_ids: Optional[List[str]] = None
    dealer_id: Optional[str] = None
    channels: Optional[List[str]] = None
    shared_with_trust_levels: Optional[List[str]] = None
    shared_with_contacts: List[str] = Field(default_factory=list)
    shared_with_partner_ids: List[str] = Field(default_factory=list)
    message: str = ""
    idempotency_key: Optional[str] = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "offer_ids": ["6f1c1f4e-2a8e-4c53-9a55-3b8f0f6d2f10"],
                "dealer_id": "dealer-42",
                "channels": ["WhatsApp", "Email"],
                "shared_with_trust_levels": ["trusted"],
                "shared_with_contacts": ["buyer@example.com", "+15550100"],
                "shared_with_partner_ids": [],
                "message": "Check out these offers.",
            }
        },
    )


class ShareHistoryEntryResponse(BaseModel):
    """One share history row."""

    id: str
    entity: str
    dealer_id: Optional[str] = None
    record_ids: List[str]
    records_summary: List[Dict[str, Any]]
    channels: List[str]
    shared_with_trust_levels: List[str]
    shared_with_contacts: List[str]
    shared_with_partner_ids: List[str]
    message: str
    status: str
    idempotency_key: Optional[str] = None
    created_at: datetime


class ShareSubmissionResponse(BaseModel):
    """Response model for a successful share."""

    success: bool
    shared_count: int
    shared: ShareHistoryEntryResponse


class MessageResponse(BaseModel):
    """Error payload carrying a user-facing message."""

    message: str


# partners (Create)
class PartnerCreateRequest(BaseModel):
    """Request model for adding a partner to the network."""

    name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = Field(None, min_length=5)
    location: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    status: PartnerStatus = PartnerStatus.PENDING
    trust_level: TrustLevel = TrustLevel.UNRATED

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Northside Motors",
                "contact_name": "Dana Reyes",
                "contact_email": "dana@northside.example",
                "contact_phone": "+15550123",
                "location": "Austin",
            }
        }
    )

    @field_validator("email", "contact_email")
    @classmethod
    def validate_email(cls, v):
        """Validate email format when an address is given."""
        if v is not None and not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        """Validate that a phone number has at least 5 characters."""
        if v is not None and len(v.strip()) < 5:
            raise ValueError("phone must be at least 5 characters")
        return v


class PartnerDirectoryEntry(BaseModel):
    """Active partner offered as a share recipient."""

    id: str
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None


# rentals
class ReservationRejectRequest(BaseModel):
    """Request model for rejecting a reservation."""

    admin_comments: Optional[str] = None


class Paging(BaseModel):
    """Paging block of a paginated collection."""

    total: int
    page: int
    page_size: int
    total_pages: int


class RentalClientPage(BaseModel):
    """One page of rental clients."""

    rows: List[Dict[str, Any]]
    paging: Paging
