from pydantic import BaseModel, Field, ConfigDict, TypeAdapter, field_validator
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import uuid4
from utils.parsers import parse_array_string, parse_phase_string, to_text


def new_rule_id() -> str:
    return f"rule-{uuid4().hex[:12]}"


# Define rule models
class RuleBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=new_rule_id)
    active: bool = True
    priority: Optional[int] = None


def _group_tag(value: Any) -> Any:
    """Group tags typed as numbers (Excel turns "5" into 5) are compared as text."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return to_text(value)
    return value


def _task_list(value: Any) -> List[str]:
    """
    Accept task ids typed as a list or as free text ("T1, T2").

    Unparsable text is passed through so pydantic reports it as a type error.
    """
    if value is None:
        return []
    result, error = parse_array_string(value)
    if error:
        return value
    return result


class CoRunRule(RuleBase):
    type: Literal["coRun"]
    tasks: List[str] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def split_tasks(cls, value: Any) -> Any:
        return _task_list(value)


class SlotRestrictionRule(RuleBase):
    type: Literal["slotRestriction"]
    clientGroup: Optional[str] = None
    workerGroup: Optional[str] = None
    minCommonSlots: Optional[int] = None

    @field_validator("clientGroup", "workerGroup", mode="before")
    @classmethod
    def group_as_text(cls, value: Any) -> Any:
        return _group_tag(value)


class LoadLimitRule(RuleBase):
    type: Literal["loadLimit"]
    workerGroup: Optional[str] = None
    maxSlotsPerPhase: Optional[int] = None

    @field_validator("workerGroup", mode="before")
    @classmethod
    def group_as_text(cls, value: Any) -> Any:
        return _group_tag(value)


class PhaseWindowRule(RuleBase):
    type: Literal["phaseWindow"]
    tasks: List[str] = Field(default_factory=list)
    allowedPhases: List[int] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def split_tasks(cls, value: Any) -> Any:
        return _task_list(value)

    @field_validator("allowedPhases", mode="before")
    @classmethod
    def expand_phases(cls, value: Any) -> Any:
        """Accept "1-3" or "1,2,3" as well as a list; a bad string is left for pydantic to reject."""
        if value is None:
            return []
        if isinstance(value, str):
            result, error = parse_phase_string(value)
            return value if error else result
        return value


class PatternMatchRule(RuleBase):
    type: Literal["patternMatch"]
    pattern: str = ""
    parameters: Optional[Dict[str, Any]] = None


class PrecedenceOverrideRule(RuleBase):
    type: Literal["precedenceOverride"]
    parameters: Optional[Dict[str, Any]] = None


RULE_MODELS = (
    CoRunRule,
    SlotRestrictionRule,
    LoadLimitRule,
    PhaseWindowRule,
    PatternMatchRule,
    PrecedenceOverrideRule,
)

Rule = Annotated[
    Union[RULE_MODELS],
    Field(discriminator="type"),
]

rule_adapter = TypeAdapter(Rule)
rule_list_adapter = TypeAdapter(List[Rule])


class RulesDocument(BaseModel):
    """The JSON document produced by a rules export."""

    model_config = ConfigDict(extra="allow")

    version: str
    timestamp: str
    rules: List[Dict[str, Any]] = Field(default_factory=list)


class RulesExportRequest(BaseModel):
    rules: List[Rule] = Field(default_factory=list)


class RulesImportResponse(BaseModel):
    rules: List[Rule]
