"""Domain entities (identity-bearing objects)."""

from automation.domain.entities.workflow import WorkflowEntity

__all__ = ["WorkflowEntity"]
