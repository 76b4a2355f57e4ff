from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from core.state import Diagnostic, Sheets, ERROR, WARNING, STRUCTURAL, VALIDATION
from schemas.rules.rules import RULE_MODELS, CoRunRule, Rule, SlotRestrictionRule, rule_adapter
from utils.constants import FIELD_ALIASES
from utils.normalize import get_normalized_value
from utils.parsers import is_missing, parse_array_string, to_text

"""
This module contains the rule-level stage of a validation pass: structural
checks on co-run groups and referential checks on slot restrictions. Load
limits, phase windows, pattern matches and precedence overrides are stored and
exported but carry no checks here.
"""

# entity a rule-level finding is filed under, by rule type
RULE_ENTITY = {
    "coRun": "tasks",
    "slotRestriction": "clients",
    "loadLimit": "workers",
    "phaseWindow": "tasks",
    "patternMatch": "tasks",
    "precedenceOverride": "tasks",
}

WHITE, GRAY, BLACK = 0, 1, 2


def coerce_rules(rules: Sequence[Any]) -> Tuple[List[Rule], List[Diagnostic]]:
    """
    Turn a mixed list of rule models and plain dicts into rule models.

    Any entry that does not describe a valid rule (a bad dict, None, a bare
    string) becomes a structural finding instead of stopping the pass.
    """
    parsed: List[Rule] = []
    diagnostics: List[Diagnostic] = []
    for position, rule in enumerate(rules, start=1):
        if isinstance(rule, RULE_MODELS):
            parsed.append(rule)
            continue
        try:
            parsed.append(rule_adapter.validate_python(rule))
        except ValidationError as e:
            detail = e.errors()[0]["msg"] if e.errors() else str(e)
            kind = rule.get("type") if isinstance(rule, dict) else None
            entity = RULE_ENTITY.get(kind, "tasks") if isinstance(kind, str) else "tasks"
            diagnostics.append(
                Diagnostic(
                    entity,
                    -1,
                    "Rules",
                    f"Invalid rule definition at position {position}: {detail}",
                    ERROR,
                    STRUCTURAL,
                )
            )
    return parsed, diagnostics


def _find_task(sheets: Sheets, task_id: str) -> Optional[Dict[str, Any]]:
    for task in sheets.tasks.rows:
        value = get_normalized_value(task, FIELD_ALIASES["taskId"])
        if not is_missing(value) and to_text(value) == task_id:
            return task
    return None


def co_run_graph(rule: CoRunRule, sheets: Sheets) -> Dict[str, List[str]]:
    """
    Dependency edges among the tasks of one co-run rule.

    Edges point from a task to each of its dependencies; dependencies outside
    the rule's own task set are ignored, as are rule tasks with no row.
    """
    members = set(rule.tasks)
    graph: Dict[str, List[str]] = {}
    for task_id in rule.tasks:
        task = _find_task(sheets, task_id)
        if task is None:
            continue
        deps, _ = parse_array_string(get_normalized_value(task, FIELD_ALIASES["dependencies"]))
        graph[task_id] = [d for d in deps if d in members]
    return graph


def has_cycle(graph: Dict[str, List[str]], order: Sequence[str]) -> bool:
    """
    Three-colour depth-first search. Reaching a gray node (one still on the
    current path) means a cycle; the search stops at the first one.
    """
    color: Dict[str, int] = {}

    for start in order:
        if color.get(start, WHITE) != WHITE:
            continue
        color[start] = GRAY
        frames = [(start, iter(graph.get(start, [])))]

        while frames:
            node, children = frames[-1]
            child = next(children, None)
            if child is None:
                frames.pop()
                color[node] = BLACK
                continue

            state = color.get(child, WHITE)
            if state == GRAY:
                return True
            if state == WHITE:
                color[child] = GRAY
                frames.append((child, iter(graph.get(child, []))))

    return False


def check_co_run_cycles(rules: Sequence[Rule], sheets: Sheets) -> List[Diagnostic]:
    diagnostics = []
    for rule in rules:
        if rule.type != "coRun" or not rule.active or len(rule.tasks) < 2:
            continue
        if has_cycle(co_run_graph(rule, sheets), rule.tasks):
            diagnostics.append(
                Diagnostic(
                    "tasks",
                    -1,
                    "Rules",
                    f"Circular dependency in co-run rule: {', '.join(rule.tasks)}",
                    ERROR,
                    STRUCTURAL,
                )
            )
    return diagnostics


def _group_exists(rows, aliases: List[str], group: str) -> bool:
    for row in rows:
        value = get_normalized_value(row, aliases)
        if not is_missing(value) and to_text(value) == group:
            return True
    return False


def check_slot_restrictions(rules: Sequence[Rule], sheets: Sheets) -> List[Diagnostic]:
    diagnostics = []
    for rule in rules:
        if not isinstance(rule, SlotRestrictionRule) or not rule.active:
            continue
        if rule.clientGroup and not _group_exists(
            sheets.clients.rows, FIELD_ALIASES["clientGroup"], rule.clientGroup
        ):
            diagnostics.append(
                Diagnostic(
                    "clients",
                    -1,
                    "Rules",
                    f"Slot Restriction rule references non-existent client group: {rule.clientGroup}.",
                    WARNING,
                    VALIDATION,
                )
            )
        if rule.workerGroup and not _group_exists(
            sheets.workers.rows, FIELD_ALIASES["workerGroup"], rule.workerGroup
        ):
            diagnostics.append(
                Diagnostic(
                    "workers",
                    -1,
                    "Rules",
                    f"Slot Restriction rule references non-existent worker group: {rule.workerGroup}.",
                    WARNING,
                    VALIDATION,
                )
            )
    return diagnostics


def check_rules(sheets: Sheets, rules: Sequence = ()) -> List[Diagnostic]:
    """Rule-level stage: read the rules, then run the co-run and slot-restriction checks."""
    parsed, diagnostics = coerce_rules(rules)
    diagnostics.extend(check_co_run_cycles(parsed, sheets))
    diagnostics.extend(check_slot_restrictions(parsed, sheets))
    return diagnostics
