import math
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from core.state import Diagnostic, Record, Sheets, ERROR, PARSE, VALIDATION
from utils.constants import FIELD_ALIASES, PRIORITY_MIN, PRIORITY_MAX, MIN_DURATION, MIN_PHASE
from utils.normalize import get_normalized_value, normalize_field_name
from utils.parsers import (
    is_missing,
    is_truthy,
    parse_array_string,
    parse_json_string,
    parse_phase_string,
    to_number,
    to_text,
)

"""
Per-row checks for clients, workers and tasks.

Every finding is scoped to one field of one row and they accumulate: a row
with a bad priority and an unknown task reference gets both diagnostics.
"""


class WorkerProfile(NamedTuple):
    skills: List[str]
    slots: List[str]


def worker_profiles(sheets: Sheets) -> List[WorkerProfile]:
    """Parsed skills and slots of every worker, computed once per pass."""
    profiles = []
    for worker in sheets.workers.rows:
        skills, _ = parse_array_string(get_normalized_value(worker, FIELD_ALIASES["workerSkills"]))
        slots, _ = parse_array_string(get_normalized_value(worker, FIELD_ALIASES["availableSlots"]))
        profiles.append(WorkerProfile(skills, slots))
    return profiles


def task_ids(sheets: Sheets) -> set:
    ids = set()
    for task in sheets.tasks.rows:
        value = get_normalized_value(task, FIELD_ALIASES["taskId"])
        if not is_missing(value):
            ids.add(to_text(value))
    return ids


def _out_of_priority_range(value: Any) -> bool:
    number = to_number(value)
    return not (PRIORITY_MIN <= number <= PRIORITY_MAX)


class RowChecker:
    """Collects the diagnostics of one row."""

    def __init__(self, entity: str, row_index: int):
        self.entity = entity
        self.row_index = row_index
        self.diagnostics: List[Diagnostic] = []

    def add(self, field: str, message: str, level: str = ERROR, category: str = VALIDATION):
        self.diagnostics.append(
            Diagnostic(self.entity, self.row_index, field, message, level, category)
        )

    def parse_error(self, field: str, message: str):
        self.add(field, message, category=PARSE)


def check_json_columns(checker: RowChecker, row: Record):
    """Every column whose name mentions 'json' must hold a JSON object."""
    for key, value in row.items():
        if "json" in normalize_field_name(key):
            _, error = parse_json_string(value)
            if error:
                checker.parse_error(key, error)


def check_client(checker: RowChecker, row: Record, sheets: Sheets, known_task_ids: Optional[set] = None):
    priority = get_normalized_value(row, FIELD_ALIASES["clientPriority"])
    if not is_missing(priority) and _out_of_priority_range(priority):
        checker.add("priorityLevel", f"Priority must be {PRIORITY_MIN}-{PRIORITY_MAX}.")

    requested, error = parse_array_string(get_normalized_value(row, FIELD_ALIASES["requestedTasks"]))
    if error:
        checker.parse_error("requestedTasks", error)
        return

    if known_task_ids is None:
        known_task_ids = task_ids(sheets)
    for task_id in dict.fromkeys(requested):
        if task_id not in known_task_ids:
            checker.add("requestedTasks", f'Task ID "{task_id}" not found.')


def check_worker(checker: RowChecker, row: Record):
    slots, error = parse_array_string(get_normalized_value(row, FIELD_ALIASES["availableSlots"]))
    if error:
        checker.parse_error("availableSlots", error)
    elif any(math.isnan(to_number(s)) for s in slots):
        checker.add("availableSlots", "Must be a list of numbers.")

    max_load = get_normalized_value(row, FIELD_ALIASES["maxLoad"])
    if not is_missing(max_load):
        load = to_number(max_load)
        if math.isnan(load):
            checker.add("maxLoadPerPhase", f"MaxLoad ({to_text(max_load)}) must be a number.")
        elif load > len(slots):
            checker.add(
                "maxLoadPerPhase",
                f"MaxLoad ({to_text(max_load)}) > available slots ({len(slots)}).",
            )

    _, error = parse_array_string(get_normalized_value(row, FIELD_ALIASES["workerSkills"]))
    if error:
        checker.parse_error("skills", error)


def check_task(checker: RowChecker, row: Record, sheets: Sheets, workers: Optional[Sequence[WorkerProfile]] = None):
    priority = get_normalized_value(row, FIELD_ALIASES["taskPriority"])
    if not is_missing(priority) and _out_of_priority_range(priority):
        checker.add("priority", f"Priority must be {PRIORITY_MIN}-{PRIORITY_MAX}.")

    duration = get_normalized_value(row, FIELD_ALIASES["duration"])
    if not is_missing(duration) and not to_number(duration) >= MIN_DURATION:
        checker.add("duration", f"Duration must be >= {MIN_DURATION}.")

    phases, error = parse_phase_string(get_normalized_value(row, FIELD_ALIASES["preferredPhases"]))
    if error:
        checker.parse_error("preferredPhases", error)
    elif any(p < MIN_PHASE for p in phases):
        checker.add("preferredPhases", "Phases must be positive integers.")

    max_concurrent = get_normalized_value(row, FIELD_ALIASES["maxConcurrent"])
    if not is_truthy(max_concurrent):
        return

    required, error = parse_array_string(get_normalized_value(row, FIELD_ALIASES["requiredSkills"]))
    if error:
        checker.parse_error("requiredSkills", error)
        return

    if workers is None:
        workers = worker_profiles(sheets)
    needed = set(required)
    qualified = sum(1 for w in workers if needed.issubset(w.skills) and w.slots)
    if not to_number(max_concurrent) <= qualified:
        checker.add(
            "maxConcurrent",
            f"MaxConcurrent ({to_text(max_concurrent)}) > qualified, available workers ({qualified}).",
        )


def validate_row(
    entity: str,
    row: Record,
    row_index: int,
    sheets: Sheets,
    lookups: Optional[Dict[str, Any]] = None,
) -> List[Diagnostic]:
    """
    Validate a single row against the rules of its entity.

    Args:
        entity (str): 'clients', 'workers' or 'tasks'.
        row (Record): The record to check.
        row_index (int): Position of the row in its sheet.
        sheets (Sheets): Full snapshot, read for cross-entity references.
        lookups (Optional[Dict[str, Any]]): Precomputed 'task_ids' and
            'workers' for a whole pass; computed on demand when omitted.

    Returns:
        List[Diagnostic]: All findings for the row, possibly empty.
    """
    lookups = lookups or {}
    checker = RowChecker(entity, row_index)
    check_json_columns(checker, row)

    if entity == "clients":
        check_client(checker, row, sheets, lookups.get("task_ids"))
    elif entity == "workers":
        check_worker(checker, row)
    elif entity == "tasks":
        check_task(checker, row, sheets, lookups.get("workers"))

    return checker.diagnostics
