"""ORM models. Import here so Base.metadata sees every table."""

from automation.infrastructure.persistence.models.workflow import (
    Workflow,
    WorkflowExecution,
)

__all__ = ["Workflow", "WorkflowExecution"]
