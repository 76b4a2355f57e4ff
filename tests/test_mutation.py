import pytest

from core.state import Sheets
from exceptions.custom_errors import InvalidFixError, UnknownEntityError
from schemas.fix.suggestions import FixProposal
from validator.builder import validate_all_data
from validator.mutation import apply_fixes, set_field


@pytest.fixture
def sheets():
    return Sheets.from_records(
        clients=[
            {"id": "C1", "Priority Level": 7, "requestedTasks": ""},
            {"id": "C2", "priorityLevel": 9},
        ]
    )


def test_edit_clears_only_the_fixed_finding(sheets):
    before = validate_all_data(sheets).ids
    assert before == {
        "clients-0-priorityLevel-Priority must be 1-5.",
        "clients-1-priorityLevel-Priority must be 1-5.",
    }

    edited = set_field(sheets, "clients", 0, "priorityLevel", 3)
    after = validate_all_data(edited).ids
    assert after == {"clients-1-priorityLevel-Priority must be 1-5."}


def test_edit_writes_to_the_existing_column_on_a_copy(sheets):
    edited = set_field(sheets, "clients", 0, "priorityLevel", 3)
    assert edited.clients.rows[0]["Priority Level"] == 3
    assert "priorityLevel" not in edited.clients.rows[0]
    assert sheets.clients.rows[0]["Priority Level"] == 7


def test_edit_of_unknown_column_adds_it(sheets):
    edited = set_field(sheets, "clients", 1, "notes", "vip")
    assert edited.clients.rows[1]["notes"] == "vip"
    assert "notes" in edited.clients.headers
    assert "notes" not in sheets.clients.headers


def test_edit_rejects_bad_targets(sheets):
    with pytest.raises(UnknownEntityError):
        set_field(sheets, "vendors", 0, "id", "x")
    with pytest.raises(InvalidFixError):
        set_field(sheets, "clients", 2, "id", "x")
    with pytest.raises(InvalidFixError):
        set_field(sheets, "clients", -1, "id", "x")


def test_apply_fixes_skips_invalid_entries(sheets):
    proposals = [
        {"entity": "clients", "rowIndex": 0, "field": "priorityLevel", "newValue": 3},
        {"entity": "vendors", "rowIndex": 0, "field": "id", "newValue": "x"},
        {"entity": "clients", "rowIndex": 5, "field": "id", "newValue": "x"},
        {"entity": "clients", "rowIndex": "1", "field": "priorityLevel", "newValue": 2},
        {"entity": "clients", "rowIndex": 1, "field": "priorityLevel"},
        "garbage",
        FixProposal(entity="clients", rowIndex=1, field="priorityLevel", newValue=2),
    ]
    outcome = apply_fixes(sheets, proposals)

    assert len(outcome.applied) == 2
    assert [s.index for s in outcome.skipped] == [1, 2, 3, 4, 5]
    assert "Row 5 does not exist" in outcome.skipped[1].reason
    assert validate_all_data(outcome.sheets).diagnostics == []
    assert sheets.clients.rows[1]["priorityLevel"] == 9


def test_apply_fixes_with_null_value_is_applied(sheets):
    outcome = apply_fixes(sheets, [{"entity": "clients", "rowIndex": 1, "field": "priorityLevel", "newValue": None}])
    assert len(outcome.applied) == 1
    assert outcome.sheets.clients.rows[1]["priorityLevel"] is None


def test_apply_fixes_requires_a_list(sheets):
    outcome = apply_fixes(sheets, {"fixes": []})
    assert outcome.applied == []
    assert [s.index for s in outcome.skipped] == [-1]
    assert outcome.sheets is sheets

    assert apply_fixes(sheets, None).skipped == []
