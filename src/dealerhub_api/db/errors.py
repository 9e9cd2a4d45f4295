"""Exceptions raised by the repositories and mapped to HTTP responses in dealerhub_api.errors."""


class RepositoryError(Exception):
    """Base class for repository errors that carry a user-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFoundError(RepositoryError):
    """No row exists for the requested id (404)."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"Record '{record_id}' not found in {table}")
        self.table = table
        self.record_id = record_id


class InvalidFieldError(RepositoryError):
    """Unknown, read-only or badly typed field, or a value outside its enumerated set (422)."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class InvalidStateError(RepositoryError):
    """The record exists but is not in a state that allows the transition (409)."""

    def __init__(self, record_id: str, current_status: str, action: str):
        super().__init__(f"Cannot {action} record '{record_id}' with status '{current_status}'")
        self.record_id = record_id
        self.current_status = current_status
        self.action = action
