import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from core.check_manager import CheckManager
from core.state import Diagnostic, Sheets, ValidationResult, ERROR, WARNING
from utils.constants import ENTITY_TYPES
from utils.logger import logger
from validator.checks import (
    check_duplicate_ids,
    check_phase_capacity,
    check_rows,
    check_rules,
    check_schema,
    check_skill_coverage,
)

STAGES = [
    ("schema", check_schema),
    ("duplicate ids", check_duplicate_ids),
    ("rows", check_rows),
    ("phase capacity", check_phase_capacity),
    ("skill coverage", check_skill_coverage),
    ("rules", check_rules),
]


def as_sheets(data: Union[Sheets, Dict[str, Any]]) -> Sheets:
    """Accept a snapshot or a plain `{entity: [records]}` mapping."""
    if isinstance(data, Sheets):
        return data
    unknown = set(data) - set(ENTITY_TYPES)
    if unknown:
        logger.warning("Ignoring unknown datasets: %s", ", ".join(sorted(unknown)))
    return Sheets.from_records(**{k: v for k, v in data.items() if k in ENTITY_TYPES})


# == Validate All Data ==
def validate_all_data(
    sheets: Union[Sheets, Dict[str, Any]],
    rules: Sequence[Any] = (),
    on_progress: Optional[Callable[[int], None]] = None,
) -> ValidationResult:
    """
    Run every validation stage over one snapshot.

    Stages run in a fixed order (schema, duplicate ids, rows, phase capacity,
    skill coverage, rules) and `on_progress` receives 0 and then a rising
    percentage after each one. The snapshot is only read.

    Args:
        sheets (Sheets | dict): Clients, workers and tasks to validate.
        rules (Sequence): Rule models or rule dicts; inactive rules are skipped.
        on_progress (Optional[Callable[[int], None]]): Progress listener.

    Returns:
        ValidationResult: Complete diagnostic list and final progress.
    """
    sheets = as_sheets(sheets)
    rules = list(rules or [])
    started = time.perf_counter()
    logger.info(
        "🔎 Validating %d clients, %d workers, %d tasks against %d rules...",
        len(sheets.clients),
        len(sheets.workers),
        len(sheets.tasks),
        len(rules),
    )

    manager = CheckManager(sheets, rules, on_progress)
    for name, check in STAGES:
        manager.add_check(name, check)
    diagnostics = manager.apply_all()

    logger.info(
        "✅ Validation finished in %.3fs: %d errors, %d warnings",
        time.perf_counter() - started,
        sum(1 for d in diagnostics if d.level == ERROR),
        sum(1 for d in diagnostics if d.level == WARNING),
    )
    return ValidationResult(diagnostics, manager.progress)


def filter_diagnostics(
    diagnostics: Sequence[Diagnostic], search: str = "", show_fixed: bool = False
) -> List[Diagnostic]:
    """Hide fixed findings unless asked, and match `search` against message and field."""
    needle = search.lower()
    return [
        d
        for d in diagnostics
        if (show_fixed or not d.fixed)
        and (not needle or needle in d.message.lower() or needle in d.field.lower())
    ]


def summarize_diagnostics(diagnostics: Sequence[Diagnostic]) -> Dict[str, Dict[str, int]]:
    """Counts per level and per entity."""
    by_level = {"error": 0, "warning": 0, "info": 0}
    by_entity = {entity: 0 for entity in ENTITY_TYPES}
    for d in diagnostics:
        by_level[d.level] = by_level.get(d.level, 0) + 1
        by_entity[d.entity] = by_entity.get(d.entity, 0) + 1
    return {"byLevel": by_level, "byEntity": by_entity}
