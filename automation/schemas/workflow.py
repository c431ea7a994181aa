"""Workflow definition schemas (save-time validation)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from automation.application.services.logic_validator import LogicValidator
from automation.domain.enums import WorkflowStatus, WorkflowTrigger


class TriggerFilter(BaseModel):
    """Single trigger filter rule ({field, operator, value})."""

    field: str = Field(..., min_length=1)
    operator: str = Field(..., min_length=1)
    value: Any = None


class TriggerConfig(BaseModel):
    """Optional pre-filter narrowing which events of a trigger kind fire the workflow."""

    enabled: bool = False
    logic: str = Field(default="AND", pattern="^(AND|OR)$")
    filters: list[TriggerFilter] = Field(default_factory=list)


class WorkflowDefinition(BaseModel):
    """Workflow definition as saved by an external editor. Rejects invalid logic trees."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    trigger: WorkflowTrigger
    trigger_config: TriggerConfig | None = None
    logic_tree: dict[str, Any]
    priority: int = Field(default=0, ge=0, le=100)
    is_active: bool = False
    status: WorkflowStatus = WorkflowStatus.DRAFT

    @field_validator("logic_tree")
    @classmethod
    def validate_logic_tree(cls, v: dict[str, Any]) -> dict[str, Any]:
        result = LogicValidator().validate(v)
        if not result.valid:
            raise ValueError(result.error)
        return v


class WorkflowActionDetailResponse(BaseModel):
    """Action detail in an execution result."""

    model_config = ConfigDict(from_attributes=True)

    workflow_id: str
    workflow_name: str
    action_type: str
    config: dict[str, Any]


class ExecutionResultResponse(BaseModel):
    """Serializable execution result for hosts that expose it over an API."""

    model_config = ConfigDict(from_attributes=True)

    success: bool
    actions: list[str]
    details: list[WorkflowActionDetailResponse]
    workflows_executed: int
    execution_time_ms: int
    error: str | None = None
