from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import Any, Dict, List, Literal, Optional
from schemas.rules.rules import Rule


# Define data models
class DiagnosticOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    entity: Literal["clients", "workers", "tasks"]
    rowIndex: int
    field: str
    message: str
    level: Literal["error", "warning", "info"] = "error"
    category: str = "validation"
    fixed: bool = False


class Datasets(BaseModel):
    """Records of all three entities; keys of each record are free-form column names."""

    model_config = ConfigDict(extra="allow")

    clients: List[Dict[str, Any]] = Field(default_factory=list)
    workers: List[Dict[str, Any]] = Field(default_factory=list)
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    headers: Optional[Dict[str, List[str]]] = None


class ValidateRequest(Datasets):
    rules: List[Rule] = Field(default_factory=list)


class ValidationSummary(BaseModel):
    byLevel: Dict[str, int]
    byEntity: Dict[str, int]


class ValidateResponse(BaseModel):
    diagnostics: List[DiagnosticOut]
    progress: int
    summary: ValidationSummary


class CellEdit(BaseModel):
    entity: Literal["clients", "workers", "tasks"]
    rowIndex: StrictInt = Field(ge=0)
    field: str = Field(min_length=1)
    newValue: Any = None


class EditRequest(ValidateRequest):
    edit: CellEdit


class EditResponse(ValidateResponse):
    clients: List[Dict[str, Any]]
    workers: List[Dict[str, Any]]
    tasks: List[Dict[str, Any]]
