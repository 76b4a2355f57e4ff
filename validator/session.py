from typing import Any, Callable, List, Optional, Sequence

from core.rule_book import RuleBook
from core.state import Diagnostic, Sheets, ValidationResult
from utils.logger import logger
from validator.builder import as_sheets, filter_diagnostics, validate_all_data
from validator.mutation import FixOutcome, apply_fixes, set_field


class ValidationSession:
    """
    Current snapshot, rules and diagnostics of one editing session.

    Every edit replaces the snapshot and triggers a full validation pass; there
    is no incremental re-validation. Passes are numbered, and a pass that
    finishes after a newer one has started is dropped so that results from a
    stale snapshot never overwrite newer ones.
    """

    def __init__(
        self,
        sheets: Any = None,
        rules: Optional[RuleBook] = None,
        on_progress: Optional[Callable[[int], None]] = None,
    ):
        self.sheets: Sheets = as_sheets(sheets) if sheets is not None else Sheets()
        self.rules: RuleBook = rules if rules is not None else RuleBook()
        self.on_progress = on_progress
        self.diagnostics: List[Diagnostic] = []
        self.progress = 0
        self._generation = 0

    def begin_pass(self) -> int:
        """Start a pass and return its generation number."""
        self._generation += 1
        return self._generation

    def commit(self, generation: int, result: ValidationResult) -> bool:
        """Store a pass result unless a newer pass was started meanwhile."""
        if generation != self._generation:
            logger.info("Discarding stale validation pass %d (latest is %d)", generation, self._generation)
            return False
        self.diagnostics = result.diagnostics
        self.progress = result.progress
        return True

    def revalidate(self) -> List[Diagnostic]:
        generation = self.begin_pass()
        result = validate_all_data(self.sheets, self.rules.rules, self._report)
        self.commit(generation, result)
        return self.diagnostics

    def _report(self, value: int):
        self.progress = value
        if self.on_progress is not None:
            self.on_progress(value)

    def replace_sheets(self, sheets: Any) -> List[Diagnostic]:
        self.sheets = as_sheets(sheets)
        return self.revalidate()

    def edit_cell(self, entity: str, row_index: int, field_name: str, new_value: Any) -> List[Diagnostic]:
        """Manual edit of one cell followed by a full pass."""
        self.sheets = set_field(self.sheets, entity, row_index, field_name, new_value)
        return self.revalidate()

    def apply_fixes(self, proposals: Any) -> FixOutcome:
        """Apply proposals (see `validator.mutation.apply_fixes`) and re-validate once."""
        outcome = apply_fixes(self.sheets, proposals)
        self.sheets = outcome.sheets
        self.revalidate()
        return outcome

    def mark_fixed(self, diagnostic_id: str) -> bool:
        """
        Flag a finding as fixed. Advisory only: the next pass rebuilds the list
        and the finding comes back, with the same id, if it still applies.
        """
        found = False
        for d in self.diagnostics:
            if d.id == diagnostic_id:
                d.fixed = True
                found = True
        return found

    def unfixed_diagnostics(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.fixed]

    def search(self, term: str = "", show_fixed: bool = False) -> List[Diagnostic]:
        return filter_diagnostics(self.diagnostics, term, show_fixed)

    def set_rules(self, rules: Sequence[Any]) -> List[Diagnostic]:
        self.rules = RuleBook(rules)
        return self.revalidate()
