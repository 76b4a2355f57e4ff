from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import Any, Dict, List, Literal, Optional
from schemas.rules.rules import Rule
from schemas.validation.datasets import Datasets, DiagnosticOut


class FixProposal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    entity: Literal["clients", "workers", "tasks"]
    rowIndex: StrictInt = Field(ge=0)
    field: str = Field(min_length=1)
    newValue: Any = Field(...)


class SkippedFix(BaseModel):
    index: int
    proposal: Any = None
    reason: str


class FixApplyRequest(Datasets):
    rules: List[Rule] = Field(default_factory=list)
    # entries are checked one at a time by apply_fixes
    fixes: Any = None


class FixApplyResponse(BaseModel):
    clients: List[Dict[str, Any]]
    workers: List[Dict[str, Any]]
    tasks: List[Dict[str, Any]]
    applied: List[FixProposal]
    skipped: List[SkippedFix]
    diagnostics: List[DiagnosticOut]
    progress: int


class FixSuggestRequest(Datasets):
    rules: List[Rule] = Field(default_factory=list)
    diagnostics: Optional[List[DiagnosticOut]] = None
