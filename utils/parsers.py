import json
import math
from typing import Any, List, NamedTuple, Optional

from utils.constants import MAX_PHASE_RANGE

"""
Lenient parsers for spreadsheet cells.

Cells arrive as whatever the upstream reader produced: plain strings typed by a
user, numbers coerced by Excel, real lists from a JSON payload, or nothing at
all. Every parser here returns a `ParseResult` and never raises, so a bad cell
only ever turns into a field-level diagnostic.
"""

MALFORMED_ARRAY = "Malformed JSON array."
INVALID_ARRAY = "Invalid array format."
INVALID_OBJECT_TEXT = 'Value must be a valid JSON object (e.g., {"key":"value"}).'
MALFORMED_OBJECT = "Malformed JSON object."
NOT_AN_OBJECT = "Value is not a valid JSON object."
NON_NUMERIC_MEMBERS = "Contains non-numeric values."
INVALID_RANGE = 'Invalid range format (e.g., "1-5").'
NON_NUMERIC_LIST = "Contains non-numeric values or invalid format."
RANGE_TOO_WIDE = f"Range spans more than {MAX_PHASE_RANGE} phases."


class ParseResult(NamedTuple):
    result: Any
    error: Optional[str] = None


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_text(value: Any) -> str:
    """Render a cell as text; integral floats lose their trailing '.0'."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def to_number(value: Any) -> float:
    """
    Coerce a cell to a float.

    Blank strings count as 0, anything unparsable becomes NaN. NaN never
    satisfies a range comparison, so callers written as
    `not (low <= n <= high)` report it as out of range.
    """
    if isinstance(value, bool):
        return float(value)
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0.0
        if "_" in text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _as_phase(number: float):
    return int(number) if number.is_integer() else number


def parse_array_string(value: Any) -> ParseResult:
    """
    Parse a list-valued cell into a list of strings.

    Accepts a real list, a JSON array literal ("[...]"), or free text separated
    by commas and/or newlines. Empty cells give an empty list.
    """
    if isinstance(value, (list, tuple)):
        return ParseResult([to_text(v) for v in value])
    if _is_number(value) and not is_blank(value):
        return ParseResult([to_text(value)])
    if not isinstance(value, str) or value.strip() == "":
        return ParseResult([])

    trimmed = value.strip()

    if trimmed.startswith("[") and trimmed.endswith("]"):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            return ParseResult([], MALFORMED_ARRAY)
        if not isinstance(parsed, list):
            return ParseResult([], INVALID_ARRAY)
        return ParseResult([to_text(v) for v in parsed])

    parts = trimmed.replace("\n", ",").split(",")
    return ParseResult([p.strip() for p in parts if p.strip()])


def parse_json_string(value: Any) -> ParseResult:
    """Parse a cell that must hold a JSON object. Empty cells yield None."""
    if isinstance(value, dict):
        return ParseResult(value)
    if not isinstance(value, str) or value.strip() == "":
        return ParseResult(None)

    trimmed = value.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return ParseResult(None, INVALID_OBJECT_TEXT)

    try:
        parsed = json.loads(trimmed)
    except ValueError:
        return ParseResult(None, MALFORMED_OBJECT)
    if not isinstance(parsed, dict):
        return ParseResult(None, NOT_AN_OBJECT)
    return ParseResult(parsed)


def parse_phase_string(value: Any) -> ParseResult:
    """
    Parse a phase cell into a list of phase numbers.

    Supported forms:
      • JSON array of numbers      "[1, 2, 4]"
      • inclusive range            "2-5"
      • comma separated numbers    "1, 3, 4"

    On any error the partial result is discarded and an empty list is returned
    together with the error message.
    """
    if isinstance(value, (list, tuple)):
        numbers = [to_number(v) for v in value]
        return ParseResult([_as_phase(n) for n in numbers if not math.isnan(n)])
    if _is_number(value) and not is_blank(value):
        return ParseResult([_as_phase(float(value))])
    if not isinstance(value, str) or value.strip() == "":
        return ParseResult([])

    trimmed = value.strip()
    phases: List[float] = []
    error = None

    if trimmed.startswith("[") and trimmed.endswith("]"):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            parsed = None
            error = MALFORMED_ARRAY
        if error is None:
            if isinstance(parsed, list):
                for item in parsed:
                    number = to_number(item) if item is not None else 0.0
                    if math.isnan(number):
                        error = NON_NUMERIC_MEMBERS
                    else:
                        phases.append(number)
            else:
                error = INVALID_ARRAY
    elif "-" in trimmed:
        parts = [p.strip() for p in trimmed.split("-")]
        if len(parts) == 2:
            start, end = to_number(parts[0]), to_number(parts[1])
            if not (math.isfinite(start) and math.isfinite(end) and start <= end):
                error = INVALID_RANGE
            elif end - start >= MAX_PHASE_RANGE:
                error = RANGE_TOO_WIDE
            else:
                phases.extend(start + step for step in range(int(end - start) + 1))
        else:
            error = INVALID_RANGE
    else:
        for item in trimmed.split(","):
            token = item.strip()
            if token == "":
                continue
            number = to_number(token)
            if math.isnan(number):
                error = NON_NUMERIC_LIST
            else:
                phases.append(number)

    if error:
        return ParseResult([], error)
    return ParseResult([_as_phase(p) for p in phases])


def format_cell_value(value: Any) -> str:
    """Display form of a cell: lists joined with ', ', dicts as JSON, None as ''."""
    if is_blank(value):
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return to_text(value)


def is_missing(value: Any) -> bool:
    """True when a cell holds no value at all (None or NaN), as opposed to an empty string."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_truthy(value: Any) -> bool:
    """Truthiness of a cell: missing, zero, empty string and False are all false."""
    if is_missing(value):
        return False
    if _is_number(value):
        return value != 0
    return bool(value)
