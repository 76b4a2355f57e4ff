import pytest

from core.state import PARSE, Sheets
from utils.parsers import INVALID_OBJECT_TEXT, MALFORMED_ARRAY, NON_NUMERIC_LIST
from validator.checks.rows import validate_row


def messages(diagnostics):
    return [(d.field, d.message) for d in diagnostics]


@pytest.mark.parametrize("priority", [0, 6, "high", "7"])
def test_client_priority_out_of_range(priority):
    found = validate_row("clients", {"id": "C1", "priorityLevel": priority}, 0, Sheets())
    assert messages(found) == [("priorityLevel", "Priority must be 1-5.")]


@pytest.mark.parametrize("priority", [1, 3, 5, "2", None])
def test_client_priority_in_range_or_missing(priority):
    assert validate_row("clients", {"id": "C1", "priorityLevel": priority}, 0, Sheets()) == []


def test_priority_alias_and_header_variants():
    found = validate_row("clients", {"ID": "C1", "Priority Level": 9}, 4, Sheets())
    assert found[0].id == "clients-4-priorityLevel-Priority must be 1-5."


def test_unknown_requested_task(clean_sheets):
    row = {"id": "C1", "priorityLevel": 2, "requestedTasks": "T1, T9, T9"}
    found = validate_row("clients", row, 0, clean_sheets)
    assert messages(found) == [("requestedTasks", 'Task ID "T9" not found.')]


def test_findings_accumulate_per_row(clean_sheets):
    row = {"id": "C1", "priorityLevel": 9, "requestedTasks": "T7"}
    found = validate_row("clients", row, 0, clean_sheets)
    assert messages(found) == [
        ("priorityLevel", "Priority must be 1-5."),
        ("requestedTasks", 'Task ID "T7" not found.'),
    ]


def test_malformed_requested_tasks_is_a_parse_error(clean_sheets):
    found = validate_row("clients", {"id": "C1", "requestedTasks": "[T1]"}, 0, clean_sheets)
    assert messages(found) == [("requestedTasks", MALFORMED_ARRAY)]
    assert found[0].category == PARSE


def test_json_columns_must_hold_objects():
    row = {"id": "C1", "priorityLevel": 1, "attributesJSON": "not json", "extra_json": '{"a": 1}'}
    found = validate_row("clients", row, 0, Sheets())
    assert messages(found) == [("attributesJSON", INVALID_OBJECT_TEXT)]


def test_worker_max_load_above_slots():
    row = {"id": "W1", "availableSlots": "1,2", "maxLoadPerPhase": 3}
    assert messages(validate_row("workers", row, 0, Sheets())) == [
        ("maxLoadPerPhase", "MaxLoad (3) > available slots (2).")
    ]


def test_worker_non_numeric_slots_and_load():
    row = {"id": "W1", "availableSlots": "a,b", "maxLoadPerPhase": "lots"}
    assert messages(validate_row("workers", row, 0, Sheets())) == [
        ("availableSlots", "Must be a list of numbers."),
        ("maxLoadPerPhase", "MaxLoad (lots) must be a number."),
    ]


def test_task_duration_and_phases():
    row = {"id": "T1", "duration": 0, "preferredPhases": "0-2"}
    assert messages(validate_row("tasks", row, 0, Sheets())) == [
        ("duration", "Duration must be >= 1."),
        ("preferredPhases", "Phases must be positive integers."),
    ]


def test_task_bad_phase_text():
    row = {"id": "T1", "duration": 1, "preferredPhases": "2,a,4"}
    assert messages(validate_row("tasks", row, 0, Sheets())) == [("preferredPhases", NON_NUMERIC_LIST)]


def test_task_max_concurrent_counts_qualified_workers():
    sheets = Sheets.from_records(
        workers=[
            {"id": "W1", "skills": "welding", "availableSlots": "1"},
            {"id": "W2", "skills": "welding", "availableSlots": ""},
            {"id": "W3", "skills": "painting", "availableSlots": "1,2"},
        ]
    )
    row = {"id": "T1", "duration": 1, "requiredSkills": "welding", "maxConcurrent": 3}
    assert messages(validate_row("tasks", row, 0, sheets)) == [
        ("maxConcurrent", "MaxConcurrent (3) > qualified, available workers (1).")
    ]

    row["maxConcurrent"] = 1
    assert validate_row("tasks", row, 0, sheets) == []


@pytest.mark.parametrize("field", ["priority", "Priority Level"])
@pytest.mark.parametrize("priority", [0, 6, "high"])
def test_task_priority_out_of_range(field, priority):
    found = validate_row("tasks", {"id": "T1", "duration": 1, field: priority}, 0, Sheets())
    assert messages(found) == [("priority", "Priority must be 1-5.")]


@pytest.mark.parametrize("duration", ["abc", "1_0", "-"])
def test_task_non_numeric_duration(duration):
    found = validate_row("tasks", {"id": "T1", "duration": duration}, 0, Sheets())
    assert messages(found) == [("duration", "Duration must be >= 1.")]


def test_task_non_numeric_max_concurrent():
    sheets = Sheets.from_records(workers=[{"id": "W1", "skills": "welding", "availableSlots": "1"}])
    row = {"id": "T1", "duration": 1, "requiredSkills": "welding", "maxConcurrent": "lots"}
    assert messages(validate_row("tasks", row, 0, sheets)) == [
        ("maxConcurrent", "MaxConcurrent (lots) > qualified, available workers (1).")
    ]


def test_unbounded_phase_range_is_a_parse_error():
    found = validate_row("tasks", {"id": "T1", "duration": 1, "preferredPhases": "1-inf"}, 0, Sheets())
    assert [(d.field, d.category) for d in found] == [("preferredPhases", PARSE)]
