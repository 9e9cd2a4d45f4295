"""
Share Submission Service

Sends a ShareRequest to the entity's share endpoint. Every failure is returned
as a ShareFailure; nothing is retried.
"""

from loguru import logger
from pydantic import ValidationError

from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import DataAccessError
from dealerhub_api.sharing.models import ShareFailure
from dealerhub_api.sharing.models import ShareHistoryEntry
from dealerhub_api.sharing.models import ShareRequest
from dealerhub_api.sharing.models import ShareSuccess
from dealerhub_api.sharing.models import SubmissionResult
from dealerhub_api.sharing.ports import DataAccess


class ShareSubmissionService:
    """Submits share requests through a DataAccess implementation."""

    def __init__(self, data_access: DataAccess):
        self.data_access = data_access

    async def submit(self, entity: ShareEntity, request: ShareRequest) -> SubmissionResult:
        """
        Submit one share request. Each call creates one history entry on the server
        unless the request carries an idempotency key the server has already seen.

        Args:
            entity: Record family being shared
            request: Validated request from build_share_request

        Returns:
            ShareSuccess with the number of shared records and the history entry,
            or ShareFailure with the server's message (or a generic one)
        """
        fallback = f"Failed to share {entity.value}"
        try:
            body = await self.data_access.submit_share(entity, request.to_payload(entity))
        except DataAccessError as e:
            logger.warning(
                "Share submission failed",
                entity=entity.value,
                status_code=e.status_code,
                error_message=e.message,
            )
            return ShareFailure(message=e.message or fallback)

        if not isinstance(body, dict) or body.get("success") is False:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("Share submission rejected", entity=entity.value, response_body=body)
            return ShareFailure(message=message or fallback)

        entry = None
        if isinstance(body.get("shared"), dict):
            try:
                entry = ShareHistoryEntry.model_validate(body["shared"])
            except ValidationError as e:
                logger.warning("Unreadable share entry in response", entity=entity.value, error=str(e))

        shared_count = body.get("shared_count")
        if not isinstance(shared_count, int):
            shared_count = len(entry.record_ids) if entry else len(request.record_ids)

        logger.info(
            "Share submitted",
            entity=entity.value,
            shared_count=shared_count,
            share_id=entry.id if entry else None,
        )
        return ShareSuccess(shared_count=shared_count, entry=entry)
