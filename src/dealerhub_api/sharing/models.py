"""
Sharing Models

Pydantic models passed between the sharing core, the data access layer and the dashboard.
"""

from datetime import datetime
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from dealerhub_api.sharing.enums import ShareEntity


class Partner(BaseModel):
    """Partner directory entry used to resolve partner contacts."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None


class ShareRequest(BaseModel):
    """Validated share submission, built by build_share_request."""

    model_config = ConfigDict(frozen=True)

    record_ids: List[str]
    dealer_id: Optional[str] = None
    channels: List[str] = Field(default_factory=list)
    trust_levels: List[str] = Field(default_factory=list)
    contacts: List[str] = Field(default_factory=list)
    partner_ids: List[str] = Field(default_factory=list)
    message: str = ""
    idempotency_key: Optional[str] = None

    def to_payload(self, entity: ShareEntity) -> Dict[str, Any]:
        """Request body for the entity's share endpoint."""
        payload = {
            entity.ids_field: list(self.record_ids),
            "dealer_id": self.dealer_id,
            "channels": list(self.channels),
            "shared_with_trust_levels": list(self.trust_levels),
            "shared_with_contacts": list(self.contacts),
            "shared_with_partner_ids": list(self.partner_ids),
            "message": self.message,
        }
        if self.idempotency_key:
            payload["idempotency_key"] = self.idempotency_key
        return payload


class ShareHistoryEntry(BaseModel):
    """One persisted share submission. Never mutated after creation."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    entity: Optional[ShareEntity] = None
    dealer_id: Optional[str] = None
    record_ids: List[str] = Field(default_factory=list)
    records_summary: List[Dict[str, Any]] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)
    trust_levels: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("trust_levels", "shared_with_trust_levels"),
    )
    contacts: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("contacts", "shared_with_contacts"),
    )
    partner_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("partner_ids", "shared_with_partner_ids"),
    )
    message: str = ""
    status: str = "pending"
    idempotency_key: Optional[str] = None
    created_at: Optional[datetime] = None


class ShareSuccess(BaseModel):
    """Submission accepted by the server."""

    shared_count: int
    entry: Optional[ShareHistoryEntry] = None

    @property
    def ok(self) -> bool:
        return True


class ShareFailure(BaseModel):
    """Submission failed; message is shown to the user verbatim."""

    message: str

    @property
    def ok(self) -> bool:
        return False


SubmissionResult = Union[ShareSuccess, ShareFailure]


class FetchResult(BaseModel):
    """
    Outcome of a list fetch.

    On failure records is empty and error holds the banner message.
    paging is set for paginated collections.
    """

    records: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
    paging: Optional[Dict[str, int]] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RecordResult(BaseModel):
    """Outcome of a single-record mutation."""

    ok: bool
    record: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
