from typing import Callable, List, Optional, Sequence, Tuple

from core.state import Diagnostic, Sheets
from utils.logger import logger

Check = Callable[[Sheets, Sequence], List[Diagnostic]]
ProgressCallback = Callable[[int], None]


class CheckManager:
    """
    Runs registered checks against one snapshot and collects their findings.

    Each check is a stage: it reads the snapshot and the rule list and returns
    its own list of diagnostics. Progress is reported after every stage as a
    share of all registered stages.
    """

    def __init__(self, sheets: Sheets, rules: Sequence = (), on_progress: Optional[ProgressCallback] = None):
        self.sheets = sheets
        self.rules = rules
        self.on_progress = on_progress
        self.checks: List[Tuple[str, Check]] = []
        self.progress = 0

    def add_check(self, name: str, check_func: Check, condition: bool = True):
        """Register a check with optional enablement condition."""
        if condition:
            self.checks.append((name, check_func))

    def apply_all(self) -> List[Diagnostic]:
        """Apply all registered checks in order."""
        diagnostics: List[Diagnostic] = []
        self._report(0)
        total = len(self.checks)
        for done, (name, check) in enumerate(self.checks, start=1):
            found = check(self.sheets, self.rules)
            logger.debug("Stage %r: %d findings", name, len(found))
            diagnostics.extend(found)
            self._report(round(done / total * 100))
        if not total:
            self._report(100)
        return diagnostics

    def _report(self, value: int):
        self.progress = max(self.progress, value)
        if self.on_progress is not None:
            self.on_progress(self.progress)
