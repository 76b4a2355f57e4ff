import math

import pytest

from utils.parsers import (
    INVALID_OBJECT_TEXT,
    INVALID_RANGE,
    MALFORMED_ARRAY,
    NON_NUMERIC_LIST,
    RANGE_TOO_WIDE,
    format_cell_value,
    is_truthy,
    parse_array_string,
    parse_json_string,
    parse_phase_string,
    to_number,
    to_text,
)


def test_phase_range_expands_inclusively():
    assert parse_phase_string("1-3") == ([1, 2, 3], None)


def test_phase_list_with_text_is_rejected_whole():
    result, error = parse_phase_string("2,a,4")
    assert result == []
    assert error == NON_NUMERIC_LIST


def test_phase_json_array():
    assert parse_phase_string("[1,2,3]") == ([1, 2, 3], None)


def test_phase_bad_range():
    assert parse_phase_string("5-2") == ([], INVALID_RANGE)
    assert parse_phase_string("1-2-3") == ([], INVALID_RANGE)


@pytest.mark.parametrize("text", ["1-inf", "-inf-3", "1-Infinity", "nan-2"])
def test_phase_range_needs_finite_bounds(text):
    assert parse_phase_string(text) == ([], INVALID_RANGE)


def test_phase_range_is_capped():
    assert parse_phase_string("1-1e9") == ([], RANGE_TOO_WIDE)
    assert parse_phase_string("1e300-1e300") == ([1e300], None)
    assert len(parse_phase_string("1-1000").result) == 1000


def test_phase_blank_and_numeric_cells():
    assert parse_phase_string(None) == ([], None)
    assert parse_phase_string("  ") == ([], None)
    assert parse_phase_string(2.0) == ([2], None)


def test_array_string_forms():
    assert parse_array_string("T1, T2\nT3") == (["T1", "T2", "T3"], None)
    assert parse_array_string('["a", "b"]') == (["a", "b"], None)
    assert parse_array_string(["a", 1.0]) == (["a", "1"], None)
    assert parse_array_string(4.0) == (["4"], None)
    assert parse_array_string("") == ([], None)
    assert parse_array_string("[a, b]") == ([], MALFORMED_ARRAY)


def test_json_string():
    assert parse_json_string('{"a": 1}') == ({"a": 1}, None)
    assert parse_json_string("") == (None, None)
    assert parse_json_string("a=1") == (None, INVALID_OBJECT_TEXT)


def test_to_number_and_to_text():
    assert to_number("3") == 3.0
    assert to_number("") == 0.0
    assert math.isnan(to_number("high"))
    assert math.isnan(to_number("1_000"))
    assert to_text(5.0) == "5"
    assert to_text(2.5) == "2.5"
    assert to_text(None) == ""


def test_format_cell_value():
    assert format_cell_value(["T1", "T2"]) == "T1, T2"
    assert format_cell_value({"a": 1}) == '{"a": 1}'
    assert format_cell_value(None) == ""
    assert format_cell_value(float("nan")) == ""


def test_is_truthy():
    assert not is_truthy(None)
    assert not is_truthy(0)
    assert not is_truthy("")
    assert is_truthy(2)
    assert is_truthy("3")
