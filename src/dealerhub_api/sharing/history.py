"""Share History Reader."""

from typing import List
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.models import ShareHistoryEntry
from dealerhub_api.sharing.ports import DataAccess


class ShareHistoryReader:
    """Reads a dealer's share history. Failures are logged and yield an empty list."""

    def __init__(self, data_access: DataAccess):
        self.data_access = data_access

    async def fetch_history(self, entity: ShareEntity, dealer_id: Optional[str]) -> List[ShareHistoryEntry]:
        """
        Get the dealer's share history for an entity, newest first.

        Args:
            entity: Record family
            dealer_id: Acting dealer; None or blank returns [] without calling storage

        Returns:
            History entries ordered by created_at descending
        """
        if not dealer_id or not dealer_id.strip():
            return []

        try:
            rows = await self.data_access.fetch_share_history(entity, dealer_id.strip())
            return [ShareHistoryEntry.model_validate(row) for row in rows]
        except (DataAccessError, ValidationError) as e:
            logger.warning(
                "Share history unavailable",
                entity=entity.value,
                dealer_id=dealer_id,
                error=str(e),
            )
            return []
