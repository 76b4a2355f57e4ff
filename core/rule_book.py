import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from exceptions.custom_errors import RuleImportError, RuleNotFoundError
from schemas.rules.rules import Rule, RulesDocument, rule_adapter, rule_list_adapter
from utils.constants import RULES_EXPORT_VERSION
from utils.logger import logger


class RuleBook:
    """
    The user's business rules, in creation order.

    Validation never reads the book directly; callers pass `active_rules()` (or
    the whole list, inactive rules are skipped by the checks) into a pass.
    """

    def __init__(self, rules: Optional[Iterable[Union[Rule, Dict[str, Any]]]] = None):
        self.rules: List[Rule] = []
        for rule in rules or []:
            self.add_rule(rule)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def add_rule(self, rule: Union[Rule, Dict[str, Any]]) -> Rule:
        """Register a rule; dicts are validated into the matching rule model."""
        if isinstance(rule, dict):
            rule = rule_adapter.validate_python(rule)
        self.rules.append(rule)
        logger.info("Rule added: %s (%s)", rule.id, rule.type)
        return rule

    def get_rule(self, rule_id: str) -> Rule:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        raise RuleNotFoundError(f"No rule with id {rule_id!r}.")

    def remove_rule(self, rule_id: str) -> Rule:
        rule = self.get_rule(rule_id)
        self.rules = [r for r in self.rules if r.id != rule_id]
        return rule

    def toggle_rule(self, rule_id: str) -> Rule:
        """Flip a rule's active flag and return the rule."""
        rule = self.get_rule(rule_id)
        rule.active = not rule.active
        return rule

    def active_rules(self, kind: Optional[str] = None) -> List[Rule]:
        return [r for r in self.rules if r.active and (kind is None or r.type == kind)]

    def export_config(self, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        """Build the rules document. Only active rules are exported, without their ids."""
        return export_rules(self.rules, timestamp)

    def to_json(self, timestamp: Optional[datetime] = None) -> str:
        return json.dumps(self.export_config(timestamp), indent=2)

    @classmethod
    def from_config(cls, document: Union[str, bytes, Dict[str, Any]]) -> "RuleBook":
        return cls(import_rules(document))


def export_rules(rules: Iterable[Rule], timestamp: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Serialize rules into `{version, timestamp, rules}`.

    Args:
        rules (Iterable[Rule]): Rules to export; inactive ones are left out.
        timestamp (Optional[datetime]): Export time, defaults to now (UTC).

    Returns:
        Dict[str, Any]: JSON-ready document.
    """
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "version": RULES_EXPORT_VERSION,
        "timestamp": timestamp.isoformat(),
        "rules": [
            r.model_dump(exclude={"id"}, exclude_none=True) for r in rules if r.active
        ],
    }


def import_rules(document: Union[str, bytes, Dict[str, Any]]) -> List[Rule]:
    """
    Read rules back from an exported document. Every rule gets a fresh id.

    Raises:
        RuleImportError: If the document is not JSON, lacks the expected keys,
            or holds a rule of unknown type or with bad parameters.
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except ValueError as e:
            raise RuleImportError(f"Rules file is not valid JSON: {e}")

    try:
        parsed = RulesDocument.model_validate(document)
        payload = [{k: v for k, v in r.items() if k != "id"} for r in parsed.rules]
        rules = rule_list_adapter.validate_python(payload)
    except ValidationError as e:
        raise RuleImportError(f"Invalid rules document: {e}")

    if parsed.version != RULES_EXPORT_VERSION:
        logger.warning(
            "Importing rules document version %s (expected %s)",
            parsed.version,
            RULES_EXPORT_VERSION,
        )
    return rules
