from utils.normalize import (
    find_field_key,
    get_normalized_value,
    normalize_field_name,
    normalize_headers,
    resolve_field_key,
)


def test_normalize_field_name_strips_case_and_punctuation():
    assert normalize_field_name("Priority Level") == "prioritylevel"
    assert normalize_field_name("priority_level") == "prioritylevel"
    assert normalize_field_name("priorityLevel") == "prioritylevel"
    assert normalize_headers(["Task ID", "max-load"]) == ["taskid", "maxload"]


def test_lookup_tries_candidates_in_order():
    row = {"Priority": 2, "Priority Level": 4}
    assert get_normalized_value(row, ["priorityLevel", "priority"]) == 4
    assert get_normalized_value(row, ["priority", "priorityLevel"]) == 2


def test_lookup_missing_field_returns_none():
    assert get_normalized_value({"id": "C1"}, ["priorityLevel"]) is None
    assert find_field_key({"id": "C1"}, ["priorityLevel"]) is None


def test_resolve_field_key_prefers_existing_column():
    row = {"Priority Level": 7}
    assert resolve_field_key(row, "priorityLevel") == "Priority Level"
    assert resolve_field_key(row, "notes") == "notes"
