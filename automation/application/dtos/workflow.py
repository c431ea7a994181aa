"""DTOs for workflow execution use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class LogicValidationResult:
    """Result of validating a logic tree at save time."""

    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class WorkflowActionDetail:
    """One action emitted by one workflow."""

    workflow_id: str
    workflow_name: str
    action_type: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkflowOutcome:
    """Outcome of evaluating a single workflow (success or classified failure).

    result is the action in logic-tree output shape ({action, config}) or
    None when the workflow triggered no action.
    """

    workflow_id: str
    workflow_name: str
    success: bool
    execution_time_ms: int
    result: dict[str, Any] | None = None
    error: str | None = None
    error_code: str | None = None

    @property
    def action(self) -> WorkflowActionDetail | None:
        if not self.success or not self.result:
            return None
        return WorkflowActionDetail(
            workflow_id=self.workflow_id,
            workflow_name=self.workflow_name,
            action_type=self.result["action"],
            config=dict(self.result.get("config") or {}),
        )


@dataclass(frozen=True)
class ExecutionResult:
    """Aggregate result of execute/test.

    success reports whether the batch ran; per-workflow failures are in
    outcomes. actions and details are in descending priority order.
    """

    success: bool
    actions: list[str] = field(default_factory=list)
    details: list[WorkflowActionDetail] = field(default_factory=list)
    workflows_executed: int = 0
    execution_time_ms: int = 0
    error: str | None = None
    outcomes: list[WorkflowOutcome] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging or API responses."""
        return asdict(self)


@dataclass(frozen=True)
class WorkflowExecutionCreate:
    """Input for persisting one workflow execution audit record."""

    workflow_id: str
    trigger: str
    context_data: dict[str, Any]
    success: bool
    result: dict[str, Any]
    execution_time_ms: int
    error: str | None = None
    error_code: str | None = None
    entity_type: str | None = None
    entity_id: str | None = None
