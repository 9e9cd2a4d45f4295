"""
Recipient Aggregator

Turns the dashboard's share form state into a validated ShareRequest.
"""

from typing import Iterable
from typing import List
from typing import Optional

from loguru import logger

from dealerhub_api.sharing.contacts import resolve_manual_contacts
from dealerhub_api.sharing.contacts import resolve_partner_contacts
from dealerhub_api.sharing.errors import NO_RECORDS_SELECTED
from dealerhub_api.sharing.errors import NO_SHARE_TARGET_SELECTED
from dealerhub_api.sharing.errors import ShareValidationError
from dealerhub_api.sharing.models import Partner
from dealerhub_api.sharing.models import ShareRequest


def build_share_request(
    record_ids: Iterable[str],
    channels: Iterable[str],
    trust_levels: Iterable[str],
    manual_contacts_raw: Optional[str],
    partner_ids: Iterable[str],
    partners: Iterable[Partner],
    dealer_id: Optional[str],
    message: str,
    dedupe_contacts: bool = False,
    idempotency_key: Optional[str] = None,
) -> ShareRequest:
    """
    Validate the share form and assemble the request.

    Contacts are the manual contacts followed by the selected partners' contacts.
    Channels and trust levels are passed through unchanged.

    Args:
        record_ids: Selected record ids
        channels: Selected channel names
        trust_levels: Selected trust level names
        manual_contacts_raw: Comma-separated contacts typed by the user
        partner_ids: Selected partner ids
        partners: Partner directory used to resolve partner contacts
        dealer_id: Acting dealer
        message: Message attached to the share
        dedupe_contacts: Drop repeated contacts, keeping the first occurrence
        idempotency_key: Optional key making a resubmission return the first entry

    Returns:
        ShareRequest ready for submission

    Raises:
        ShareValidationError: NoRecordsSelected when record_ids is empty,
            NoShareTargetSelected when no channel, trust level or partner is given
            and the manual contacts field is blank
    """
    record_ids = list(record_ids)
    channels = list(channels)
    trust_levels = list(trust_levels)
    partner_ids = list(partner_ids)

    if not record_ids:
        raise ShareValidationError(NO_RECORDS_SELECTED)

    if not channels and not trust_levels and not partner_ids and not (manual_contacts_raw or "").strip():
        raise ShareValidationError(NO_SHARE_TARGET_SELECTED)

    manual_contacts = resolve_manual_contacts(manual_contacts_raw)

    contacts: List[str] = manual_contacts + resolve_partner_contacts(partner_ids, partners)
    if dedupe_contacts:
        contacts = list(dict.fromkeys(contacts))

    logger.debug(
        "Share request built",
        record_count=len(record_ids),
        channels=channels,
        trust_levels=trust_levels,
        contact_count=len(contacts),
        partner_count=len(partner_ids),
    )

    return ShareRequest(
        record_ids=record_ids,
        dealer_id=dealer_id,
        channels=channels,
        trust_levels=trust_levels,
        contacts=contacts,
        partner_ids=partner_ids,
        message=message,
        idempotency_key=idempotency_key,
    )
