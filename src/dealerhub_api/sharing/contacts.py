"""Contact resolution for share requests. Neither function raises."""

from typing import Iterable
from typing import List
from typing import Optional

from dealerhub_api.sharing.models import Partner


def resolve_manual_contacts(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated contact string into contacts.

    Entries are stripped and empty entries dropped. Order and duplicates are kept.

    Example:
        >>> resolve_manual_contacts(" a@x.com, ,+15550100 ,a@x.com")
        ['a@x.com', '+15550100', 'a@x.com']
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def resolve_partner_contacts(partner_ids: Iterable[str], partners: Iterable[Partner]) -> List[str]:
    """
    Collect the contact email then contact phone of each selected partner.

    Ids missing from the directory are skipped; empty contact fields are never added.
    """
    by_id = {partner.id: partner for partner in partners}
    contacts: List[str] = []
    for partner_id in partner_ids:
        partner = by_id.get(partner_id)
        if partner is None:
            continue
        if partner.contact_email:
            contacts.append(partner.contact_email)
        if partner.contact_phone:
            contacts.append(partner.contact_phone)
    return contacts
