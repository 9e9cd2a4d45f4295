"""
Sharing Module

Backend-agnostic core of the dealer back office:
- Selection state for list screens
- Contact resolution and share request assembly
- Share submission and share history
- Record services with optimistic field edits

Storage is reached only through a DataAccess implementation.
"""

from dealerhub_api.sharing.aggregator import build_share_request
from dealerhub_api.sharing.contacts import resolve_manual_contacts
from dealerhub_api.sharing.contacts import resolve_partner_contacts
from dealerhub_api.sharing.edits import EditState
from dealerhub_api.sharing.edits import FieldEdit
from dealerhub_api.sharing.enums import RecordEntity
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.errors import ShareValidationError
from dealerhub_api.sharing.history import ShareHistoryReader
from dealerhub_api.sharing.models import FetchResult
from dealerhub_api.sharing.models import Partner
from dealerhub_api.sharing.models import RecordResult
from dealerhub_api.sharing.models import ShareFailure
from dealerhub_api.sharing.models import ShareHistoryEntry
from dealerhub_api.sharing.models import ShareRequest
from dealerhub_api.sharing.models import ShareSuccess
from dealerhub_api.sharing.records import RecordService
from dealerhub_api.sharing.selection import SelectionSet
from dealerhub_api.sharing.submission import ShareSubmissionService
from dealerhub_api.sharing.workflow import ShareWorkflow

__all__ = [
    "build_share_request",
    "resolve_manual_contacts",
    "resolve_partner_contacts",
    "EditState",
    "FieldEdit",
    "RecordEntity",
    "ShareEntity",
    "DataAccessError",
    "ShareValidationError",
    "ShareHistoryReader",
    "FetchResult",
    "Partner",
    "RecordResult",
    "ShareFailure",
    "ShareHistoryEntry",
    "ShareRequest",
    "ShareSuccess",
    "RecordService",
    "SelectionSet",
    "ShareSubmissionService",
    "ShareWorkflow",
]
