import re
from typing import Any, Iterable, List, Mapping, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_field_name(name: Any) -> str:
    """Lower-case a column name and strip every non-alphanumeric character.

    "Priority Level", "priority_level" and "priorityLevel" all become
    "prioritylevel".
    """
    return _NON_ALNUM.sub("", str(name).lower())


def normalize_headers(headers: Iterable[Any]) -> List[str]:
    """Normalize every header of a sheet."""
    return [normalize_field_name(h) for h in headers]


def find_field_key(row: Mapping[str, Any], candidates: Iterable[str]) -> Optional[str]:
    """
    Return the actual key of `row` matching the first candidate that is present.

    Candidates are tried in order, and for each candidate the row keys are
    scanned in their own order, so the lookup is deterministic for a given row.
    """
    for candidate in candidates:
        wanted = normalize_field_name(candidate)
        for key in row:
            if normalize_field_name(key) == wanted:
                return key
    return None


def get_normalized_value(row: Mapping[str, Any], candidates: Iterable[str]) -> Any:
    """
    Look up a logical field in a record whose column names may vary.

    Args:
        row (Mapping[str, Any]): One record, column name -> cell value.
        candidates (Iterable[str]): Accepted names for the field, most specific first.

    Returns:
        Any: The first matching cell value, or None if no column matches.
    """
    key = find_field_key(row, candidates)
    if key is None:
        return None
    return row[key]


def resolve_field_key(row: Mapping[str, Any], field: str) -> str:
    """Key to write `field` to: the matching existing column, else `field` itself."""
    key = find_field_key(row, [field])
    return field if key is None else key
