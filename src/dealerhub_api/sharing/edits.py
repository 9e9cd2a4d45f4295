"""
Field Edits

An inline cell edit is shown immediately and confirmed or undone once the
server answers:

    PENDING --commit()--> COMMITTED
    PENDING --rollback(error)--> ROLLED_BACK
"""

from enum import Enum
from typing import Any
from typing import Dict
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict


class EditState(str, Enum):
    """Lifecycle of a field edit."""

    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class FieldEdit(BaseModel):
    """A single-field edit of a cached record."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    field: str
    previous_value: Any = None
    new_value: Any = None
    state: EditState = EditState.PENDING
    error: Optional[str] = None

    @classmethod
    def begin(cls, record: Dict[str, Any], field: str, new_value: Any) -> "FieldEdit":
        """Start an edit of field on record."""
        return cls(
            record_id=str(record.get("id")),
            field=field,
            previous_value=record.get(field),
            new_value=new_value,
        )

    def commit(self) -> "FieldEdit":
        self._require_pending()
        return self.model_copy(update={"state": EditState.COMMITTED})

    def rollback(self, error: str) -> "FieldEdit":
        self._require_pending()
        return self.model_copy(update={"state": EditState.ROLLED_BACK, "error": error})

    @property
    def displayed_value(self) -> Any:
        """Value the cell shows in the current state."""
        if self.state == EditState.ROLLED_BACK:
            return self.previous_value
        return self.new_value

    def apply(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of record showing this edit's displayed value."""
        return {**record, self.field: self.displayed_value}

    def _require_pending(self) -> None:
        if self.state != EditState.PENDING:
            raise ValueError(f"Edit of '{self.field}' is already {self.state.value}")
