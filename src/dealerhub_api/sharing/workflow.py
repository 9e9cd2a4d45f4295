"""
Share Workflow

Ties the selection, the recipient aggregator, the submission service and the
history reader together for one share screen:

    selection -> build_share_request -> submit -> clear selection -> re-fetch history
"""

from typing import Iterable
from typing import List
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from dealerhub_api.sharing.aggregator import build_share_request
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.history import ShareHistoryReader
from dealerhub_api.sharing.models import Partner
from dealerhub_api.sharing.models import ShareHistoryEntry
from dealerhub_api.sharing.models import ShareSuccess
from dealerhub_api.sharing.models import SubmissionResult
from dealerhub_api.sharing.ports import DataAccess
from dealerhub_api.sharing.selection import SelectionSet
from dealerhub_api.sharing.submission import ShareSubmissionService


class ShareWorkflow:
    """State and actions of one entity's share screen."""

    def __init__(
        self,
        data_access: DataAccess,
        entity: ShareEntity,
        dealer_id: Optional[str],
        dedupe_contacts: bool = False,
    ):
        self.data_access = data_access
        self.entity = entity
        self.dealer_id = dealer_id
        self.dedupe_contacts = dedupe_contacts
        self.selection = SelectionSet()
        self.partners: List[Partner] = []
        self.history: List[ShareHistoryEntry] = []
        self._submission = ShareSubmissionService(data_access)
        self._history_reader = ShareHistoryReader(data_access)

    async def load_partners(self) -> List[Partner]:
        """Load the partner directory; a failure leaves the directory empty."""
        try:
            rows = await self.data_access.fetch_partner_directory()
            self.partners = [Partner.model_validate(row) for row in rows]
        except (DataAccessError, ValidationError) as e:
            logger.warning("Partner directory unavailable", entity=self.entity.value, error=str(e))
            self.partners = []
        return self.partners

    async def refresh_history(self) -> List[ShareHistoryEntry]:
        self.history = await self._history_reader.fetch_history(self.entity, self.dealer_id)
        return self.history

    async def share(
        self,
        channels: Iterable[str],
        trust_levels: Iterable[str],
        manual_contacts_raw: Optional[str] = None,
        partner_ids: Iterable[str] = (),
        message: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> SubmissionResult:
        """
        Share the selected records.

        On success the selection is cleared and the history re-fetched.
        On failure the selection is kept so the user can retry.

        Raises:
            ShareValidationError: If nothing is selected or no target is given
        """
        request = build_share_request(
            record_ids=self.selection.selected_ids,
            channels=channels,
            trust_levels=trust_levels,
            manual_contacts_raw=manual_contacts_raw,
            partner_ids=partner_ids,
            partners=self.partners,
            dealer_id=self.dealer_id,
            message=message if message is not None else self.entity.default_message,
            dedupe_contacts=self.dedupe_contacts,
            idempotency_key=idempotency_key,
        )

        result = await self._submission.submit(self.entity, request)
        if isinstance(result, ShareSuccess):
            self.selection = self.selection.clear()
            await self.refresh_history()
        return result
