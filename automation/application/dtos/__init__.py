"""Application DTOs (no dependency on ORM or presentation schemas)."""

from automation.application.dtos.workflow import (
    ExecutionResult,
    LogicValidationResult,
    WorkflowActionDetail,
    WorkflowExecutionCreate,
    WorkflowOutcome,
)

__all__ = [
    "ExecutionResult",
    "LogicValidationResult",
    "WorkflowActionDetail",
    "WorkflowExecutionCreate",
    "WorkflowOutcome",
]
