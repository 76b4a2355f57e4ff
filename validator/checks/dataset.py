import math
from collections import Counter
from typing import Any, Dict, List, Sequence

from core.state import Diagnostic, Sheets, WARNING, VALIDATION
from utils.constants import FIELD_ALIASES, REQUIRED_COLUMNS
from utils.normalize import get_normalized_value, normalize_field_name, normalize_headers
from utils.parsers import is_missing, is_truthy, parse_array_string, to_number, to_text
from validator.checks.rows import task_ids, validate_row, worker_profiles

"""
This module contains the dataset-level stages of a validation pass. Each stage
takes the snapshot and the rule list and returns its own diagnostics.
"""


def id_aliases(entity: str) -> List[str]:
    singular = entity[:-1]
    return ["id", f"{singular}Id", f"{singular}ID", f"{singular}_id"]


def check_schema(sheets: Sheets, rules: Sequence = ()) -> List[Diagnostic]:
    """Report required columns missing from a non-empty sheet, one finding per sheet."""
    diagnostics = []
    for entity, sheet in sheets.items():
        if not sheet.rows:
            continue
        headers = set(normalize_headers(sheet.headers))
        required = REQUIRED_COLUMNS.get(entity, [])
        missing = [col for col in required if normalize_field_name(col) not in headers]
        if missing:
            diagnostics.append(
                Diagnostic(entity, -1, "File", f"Missing required columns: {', '.join(missing)}")
            )
    return diagnostics


def check_duplicate_ids(sheets: Sheets, rules: Sequence = ()) -> List[Diagnostic]:
    """
    Flag repeated ids within each sheet.

    The first occurrence owns the id; each later one is reported on its own
    row and points back at the first one in 1-based form.
    """
    diagnostics = []
    for entity, sheet in sheets.items():
        seen: Dict[str, int] = {}
        aliases = id_aliases(entity)
        for index, row in enumerate(sheet.rows):
            value = get_normalized_value(row, aliases)
            if is_missing(value):
                continue
            key = to_text(value)
            if key.strip() == "":
                continue
            if key in seen:
                diagnostics.append(
                    Diagnostic(
                        entity,
                        index,
                        "id",
                        f'Duplicate ID "{key}" also found at row {seen[key] + 1}',
                    )
                )
            else:
                seen[key] = index
    return diagnostics


def check_rows(sheets: Sheets, rules: Sequence = ()) -> List[Diagnostic]:
    """Run the row validator over every row of every sheet."""
    lookups = {"task_ids": task_ids(sheets), "workers": worker_profiles(sheets)}
    diagnostics = []
    for entity, sheet in sheets.items():
        for index, row in enumerate(sheet.rows):
            diagnostics.extend(validate_row(entity, row, index, sheets, lookups))
    return diagnostics


def phase_slot_counts(sheets: Sheets) -> Counter:
    """How many workers offer each phase."""
    slots = Counter()
    for worker in sheets.workers.rows:
        values, _ = parse_array_string(get_normalized_value(worker, FIELD_ALIASES["availableSlots"]))
        for value in values:
            number = to_number(value)
            if not math.isnan(number):
                slots[_phase_key(number)] += 1
    return slots


def _phase_key(value: Any):
    number = to_number(value)
    if math.isnan(number):
        return to_text(value)
    return int(number) if number.is_integer() else number


def phase_requirements(sheets: Sheets) -> Dict[Any, float]:
    """
    Summed task duration per phase.

    Only tasks naming a single phase count. Tasks that only give
    `preferredPhases` are not spread over those phases. A missing, zero or
    non-numeric duration counts as 1.
    """
    required: Dict[Any, float] = {}
    for task in sheets.tasks.rows:
        phase = get_normalized_value(task, FIELD_ALIASES["phase"])
        if is_missing(phase) or to_text(phase).strip() == "":
            continue
        duration = get_normalized_value(task, FIELD_ALIASES["duration"])
        amount = to_number(duration) if is_truthy(duration) else 1.0
        if math.isnan(amount):
            amount = 1.0
        key = _phase_key(phase)
        required[key] = required.get(key, 0) + amount
    return required


def check_phase_capacity(sheets: Sheets, rules: Sequence = ()) -> List[Diagnostic]:
    """Compare per-phase demand with the number of worker slots offered in that phase."""
    available = phase_slot_counts(sheets)
    diagnostics = []
    for phase, required in phase_requirements(sheets).items():
        offered = available.get(phase, 0)
        if required > offered:
            diagnostics.append(
                Diagnostic(
                    "tasks",
                    -1,
                    "Phase Saturation",
                    f"Phase {phase} overloaded: requires {to_text(required)} slots, "
                    f"but only {offered} are available.",
                )
            )
    return diagnostics


def check_skill_coverage(sheets: Sheets, rules: Sequence = ()) -> List[Diagnostic]:
    """Warn about skills that tasks require but no worker has."""
    required: Dict[str, None] = {}
    for task in sheets.tasks.rows:
        skills, _ = parse_array_string(get_normalized_value(task, FIELD_ALIASES["requiredSkills"]))
        required.update(dict.fromkeys(skills))

    offered = set()
    for profile in worker_profiles(sheets):
        offered.update(profile.skills)

    return [
        Diagnostic(
            "tasks",
            -1,
            "Skill Coverage",
            f'Skill "{skill}" is required by tasks but not provided by any worker.',
            WARNING,
            VALIDATION,
        )
        for skill in required
        if skill not in offered
    ]
