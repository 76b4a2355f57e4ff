import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from utils.constants import ENTITY_TYPES

Record = Dict[str, Any]

ERROR = "error"
WARNING = "warning"
INFO = "info"

PARSE = "parse"
VALIDATION = "validation"
STRUCTURAL = "structural"


@dataclass
class Sheet:
    """
    One uploaded dataset: the rows of a single entity and the headers seen on
    load.
    """

    rows: List[Record] = field(default_factory=list)
    """Records in source order; a row's position is its row index."""
    headers: Optional[List[str]] = None
    """Column names as found in the source. Defaults to the keys of the first
    row, which is how data restored from storage recovers its headers.
    """

    def __post_init__(self):
        if self.headers is None:
            self.headers = list(self.rows[0].keys()) if self.rows else []

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class Sheets:
    """
    A snapshot of all three datasets validated together.

    Validation only ever reads a snapshot; edits go through `copy()` so that a
    snapshot handed to a validation pass is never changed under it.
    """

    clients: Sheet = field(default_factory=Sheet)
    workers: Sheet = field(default_factory=Sheet)
    tasks: Sheet = field(default_factory=Sheet)

    def __getitem__(self, entity: str) -> Sheet:
        if entity not in ENTITY_TYPES:
            raise KeyError(entity)
        return getattr(self, entity)

    def items(self) -> Iterator[Tuple[str, Sheet]]:
        for entity in ENTITY_TYPES:
            yield entity, getattr(self, entity)

    def copy(self) -> "Sheets":
        return copy.deepcopy(self)

    @classmethod
    def from_records(
        cls,
        clients: Optional[List[Record]] = None,
        workers: Optional[List[Record]] = None,
        tasks: Optional[List[Record]] = None,
    ) -> "Sheets":
        return cls(
            clients=Sheet(list(clients or [])),
            workers=Sheet(list(workers or [])),
            tasks=Sheet(list(tasks or [])),
        )


def diagnostic_id(entity: str, row_index: int, field_name: str, message: str) -> str:
    """Stable id for a finding, identical across passes over unchanged data."""
    return f"{entity}-{row_index}-{field_name}-{message}"


@dataclass
class Diagnostic:
    """A single validation finding."""

    entity: str
    """'clients', 'workers' or 'tasks'."""
    row_index: int
    """0-based row, or -1 for dataset-level and rule-level findings."""
    field: str
    """Logical field name, or a label such as 'File', 'Rules', 'Phase Saturation'."""
    message: str
    level: str = ERROR
    """'error', 'warning' or 'info'."""
    category: str = VALIDATION
    """'parse', 'validation' or 'structural'. Not part of the id."""
    fixed: bool = False
    """Advisory flag set by the user; never read by validation."""
    id: str = field(init=False)

    def __post_init__(self):
        self.id = diagnostic_id(self.entity, self.row_index, self.field, self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "entity": self.entity,
            "rowIndex": self.row_index,
            "field": self.field,
            "message": self.message,
            "level": self.level,
            "category": self.category,
            "fixed": self.fixed,
        }


@dataclass
class ValidationResult:
    """Outcome of one full validation pass."""

    diagnostics: List[Diagnostic]
    progress: int = 100
    """Last progress value reported, 0-100."""

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == WARNING]

    @property
    def ids(self) -> set:
        return {d.id for d in self.diagnostics}
