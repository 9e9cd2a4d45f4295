"""
Selection State

Tracks which records are checked on a list screen. Every transition returns
a new SelectionSet; the current one is never modified.

Ids stay selected when the visible list changes (filtering, searching).
Call prune() to drop ids that are no longer visible.
"""

from typing import Iterable
from typing import Tuple

from pydantic import BaseModel
from pydantic import ConfigDict


class SelectionSet(BaseModel):
    """Ordered set of selected record ids plus the header checkbox state."""

    model_config = ConfigDict(frozen=True)

    selected_ids: Tuple[str, ...] = ()
    select_all: bool = False

    def toggle_all(self, all_visible_ids: Iterable[str], checked: bool) -> "SelectionSet":
        """
        Check or uncheck the header checkbox.

        Checking replaces the selection with the visible ids; unchecking empties it.
        """
        if not checked:
            return SelectionSet()
        return SelectionSet(selected_ids=tuple(dict.fromkeys(all_visible_ids)), select_all=True)

    def toggle_one(self, record_id: str, checked: bool) -> "SelectionSet":
        """Check or uncheck a single row; unchecking any row clears select_all."""
        if checked:
            if record_id in self.selected_ids:
                return self
            return SelectionSet(selected_ids=self.selected_ids + (record_id,), select_all=self.select_all)
        return SelectionSet(
            selected_ids=tuple(rid for rid in self.selected_ids if rid != record_id),
            select_all=False,
        )

    def prune(self, visible_ids: Iterable[str]) -> "SelectionSet":
        """Keep only ids that are still visible."""
        visible = set(visible_ids)
        kept = tuple(rid for rid in self.selected_ids if rid in visible)
        return SelectionSet(selected_ids=kept, select_all=self.select_all and len(kept) == len(self.selected_ids))

    def clear(self) -> "SelectionSet":
        return SelectionSet()

    def is_selected(self, record_id: str) -> bool:
        return record_id in self.selected_ids

    def __len__(self) -> int:
        return len(self.selected_ids)
