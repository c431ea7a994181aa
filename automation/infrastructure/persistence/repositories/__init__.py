"""SQLAlchemy repositories implementing the application store protocols."""

from automation.infrastructure.persistence.repositories.workflow_execution_repo import (
    WorkflowExecutionRepository,
)
from automation.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowRepository,
)

__all__ = ["WorkflowExecutionRepository", "WorkflowRepository"]
