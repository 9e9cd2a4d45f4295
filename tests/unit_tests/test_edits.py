"""Unit tests for FieldEdit."""

import pytest

from dealerhub_api.sharing.edits import EditState
from dealerhub_api.sharing.edits import FieldEdit


@pytest.fixture
def record():
    return {"id": "o1", "status": "New", "contacted": False}


class TestFieldEdit:
    """Tests for the pending, committed and rolled back states."""

    def test_begin_is_pending(self, record):
        """Test that a new edit shows the new value."""
        edit = FieldEdit.begin(record, "status", "Accepted")

        assert edit.state == EditState.PENDING
        assert edit.previous_value == "New"
        assert edit.displayed_value == "Accepted"
        assert edit.apply(record) == {"id": "o1", "status": "Accepted", "contacted": False}

    def test_commit(self, record):
        """Test that a committed edit keeps the new value."""
        edit = FieldEdit.begin(record, "contacted", True).commit()

        assert edit.state == EditState.COMMITTED
        assert edit.apply(record)["contacted"] is True

    def test_rollback_restores_previous_value(self, record):
        """Test that a rolled back edit shows the previous value and the error."""
        edit = FieldEdit.begin(record, "status", "Bogus").rollback("Invalid value for status")

        assert edit.state == EditState.ROLLED_BACK
        assert edit.displayed_value == "New"
        assert edit.error == "Invalid value for status"

    def test_apply_does_not_mutate(self, record):
        """Test that apply returns a copy."""
        FieldEdit.begin(record, "status", "Accepted").apply(record)

        assert record["status"] == "New"

    @pytest.mark.parametrize("finish", ["commit", "rollback"])
    def test_finished_edit_cannot_transition(self, record, finish):
        """Test that only a pending edit can be committed or rolled back."""
        edit = FieldEdit.begin(record, "status", "Accepted")
        edit = edit.commit() if finish == "commit" else edit.rollback("boom")

        with pytest.raises(ValueError):
            edit.commit()
        with pytest.raises(ValueError):
            edit.rollback("again")
