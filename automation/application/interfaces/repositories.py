"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from automation.application.dtos.workflow import WorkflowExecutionCreate
    from automation.domain.entities.workflow import WorkflowEntity


# Workflow definition feed (read-only to the engine)
class IWorkflowRepository(Protocol):
    """Protocol for reading workflow definitions (DIP)."""

    async def get_active_by_trigger(
        self, trigger: str, limit: int
    ) -> list[WorkflowEntity]:
        """Return at most limit enabled workflows for trigger, priority descending."""

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        """Return workflow by id regardless of status, or None."""


# Execution audit sink and statistics
class IWorkflowExecutionRepository(Protocol):
    """Protocol for persisting execution records and workflow statistics (DIP)."""

    async def create_execution(self, data: WorkflowExecutionCreate) -> str:
        """Persist one execution record; return its id."""

    async def bump_stats(self, workflow_id: str) -> None:
        """Increment execution_count and set last_executed_at for the workflow."""
