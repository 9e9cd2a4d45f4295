"""Exceptions raised by the sharing core and its data access layer."""

from typing import Optional

NO_RECORDS_SELECTED = "NoRecordsSelected"
NO_SHARE_TARGET_SELECTED = "NoShareTargetSelected"

VALIDATION_MESSAGES = {
    NO_RECORDS_SELECTED: "Select at least one record to share.",
    NO_SHARE_TARGET_SELECTED: "Select at least one channel, trust level, contact or partner.",
}


class ShareValidationError(ValueError):
    """A share request was rejected locally, before any network call."""

    def __init__(self, code: str):
        super().__init__(VALIDATION_MESSAGES.get(code, code))
        self.code = code


class DataAccessError(Exception):
    """
    A storage call failed.

    Args:
        message: Message from the server body when available, else a description of the failure
        status_code: HTTP status of the failed response, None for transport errors
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
