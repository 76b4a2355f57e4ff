import pytest

from core.state import ERROR, STRUCTURAL, WARNING, Sheets
from schemas.rules.rules import CoRunRule, LoadLimitRule, SlotRestrictionRule
from validator.builder import validate_all_data
from validator.checks.rules import check_rules, co_run_graph, has_cycle


def cyclic_tasks():
    return [
        {"id": "T1", "dependencies": "T2"},
        {"id": "T2", "dependsOn": "T3"},
        {"id": "T3", "dependencies": ["T1"]},
    ]


def test_co_run_cycle_gives_one_structural_error():
    sheets = Sheets.from_records(tasks=cyclic_tasks())
    found = check_rules(sheets, [{"type": "coRun", "tasks": ["T1", "T2", "T3"]}])
    assert len(found) == 1
    assert found[0].level == ERROR
    assert found[0].category == STRUCTURAL
    assert found[0].message == "Circular dependency in co-run rule: T1, T2, T3"


def test_removing_a_dependency_clears_the_cycle():
    tasks = cyclic_tasks()
    tasks[2]["dependencies"] = ""
    sheets = Sheets.from_records(tasks=tasks)
    assert check_rules(sheets, [{"type": "coRun", "tasks": ["T1", "T2", "T3"]}]) == []


def test_dependencies_outside_the_rule_are_ignored():
    sheets = Sheets.from_records(tasks=cyclic_tasks())
    rule = CoRunRule(type="coRun", tasks=["T1", "T2"])
    assert co_run_graph(rule, sheets) == {"T1": ["T2"], "T2": []}
    assert check_rules(sheets, [rule]) == []


def test_inactive_and_single_task_rules_are_skipped():
    sheets = Sheets.from_records(tasks=cyclic_tasks())
    rules = [
        {"type": "coRun", "tasks": ["T1", "T2", "T3"], "active": False},
        {"type": "coRun", "tasks": ["T1"]},
    ]
    assert check_rules(sheets, rules) == []


def test_has_cycle_handles_self_loops_and_dags():
    assert has_cycle({"A": ["A"]}, ["A"])
    assert not has_cycle({"A": ["B", "C"], "B": ["C"], "C": []}, ["A", "B", "C"])


def test_slot_restriction_dangling_groups_are_warnings(clean_sheets):
    rules = [
        {"type": "slotRestriction", "clientGroup": "G1", "workerGroup": "WG1"},
        {"type": "slotRestriction", "clientGroup": "G9", "workerGroup": "WG9", "minCommonSlots": 1},
    ]
    found = check_rules(clean_sheets, rules)
    assert [(d.entity, d.level, d.message) for d in found] == [
        ("clients", WARNING, "Slot Restriction rule references non-existent client group: G9."),
        ("workers", WARNING, "Slot Restriction rule references non-existent worker group: WG9."),
    ]


def test_invalid_rule_definition_does_not_stop_the_pass():
    sheets = Sheets.from_records(tasks=cyclic_tasks())
    rules = [
        {"type": "loadLimit", "maxSlotsPerPhase": "many"},
        {"type": "coRun", "tasks": "T1, T2, T3"},
    ]
    found = check_rules(sheets, rules)
    assert len(found) == 2
    assert found[0].entity == "workers"
    assert found[0].message.startswith("Invalid rule definition at position 1:")
    assert found[1].message == "Circular dependency in co-run rule: T1, T2, T3"


def test_rule_findings_flow_through_full_pass(clean_records):
    clean_records["tasks"][0]["dependencies"] = "T2"
    clean_records["tasks"][1]["dependencies"] = "T1"
    result = validate_all_data(clean_records, [{"type": "coRun", "tasks": ["T1", "T2"]}])
    assert [d.field for d in result.errors] == ["Rules"]


@pytest.mark.parametrize("bad", [None, "coRun", 42, ["T1"]])
def test_non_rule_entries_become_findings(bad):
    sheets = Sheets.from_records(clients=[{"id": "C1", "priorityLevel": 9}])
    result = validate_all_data(sheets, [bad])

    fields = [(d.field, d.category) for d in result.diagnostics]
    assert ("priorityLevel", "validation") in fields
    invalid = [d for d in result.diagnostics if d.field == "Rules"]
    assert len(invalid) == 1
    assert invalid[0].category == STRUCTURAL
    assert invalid[0].message.startswith("Invalid rule definition at position 1:")


def test_invalid_entry_does_not_hide_later_rules():
    sheets = Sheets.from_records(tasks=cyclic_tasks())
    found = check_rules(sheets, [None, CoRunRule(type="coRun", tasks=["T1", "T2", "T3"])])
    assert [d.message.split(":")[0] for d in found] == [
        "Invalid rule definition at position 1",
        "Circular dependency in co-run rule",
    ]


def test_missing_rule_list_is_treated_as_empty(clean_sheets):
    assert validate_all_data(clean_sheets, None).diagnostics == []


def test_numeric_group_tags_compare_as_text():
    assert SlotRestrictionRule(type="slotRestriction", clientGroup=5, workerGroup=2.0).clientGroup == "5"
    assert LoadLimitRule(type="loadLimit", workerGroup=7).workerGroup == "7"

    sheets = Sheets.from_records(
        clients=[{"id": "C1", "groupTag": 5}],
        workers=[{"id": "W1", "workerGroup": "2"}],
    )
    rules = [{"type": "slotRestriction", "clientGroup": 5, "workerGroup": 2}]
    assert check_rules(sheets, rules) == []
