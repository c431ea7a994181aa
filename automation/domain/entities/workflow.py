"""Workflow domain entity.

A workflow is a definition: a trigger, a logic tree evaluated against the
event context, and a priority ordering it among workflows sharing the
trigger. The engine only reads workflows; statistics are bumped by the
execution recorder.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from automation.domain.enums import WorkflowStatus


@dataclass
class WorkflowEntity:
    """Domain entity for a workflow definition (trigger + logic tree)."""

    id: str
    name: str
    trigger: str
    logic_tree: Any
    priority: int = 0
    is_active: bool = True
    status: str = WorkflowStatus.ACTIVE.value
    trigger_config: dict[str, Any] | None = None
    description: str | None = None
    execution_count: int = 0
    last_executed_at: datetime | None = None
    version: int = 1
    created_at: datetime | None = field(default=None, compare=False)

    def is_enabled(self) -> bool:
        """Return whether the workflow is both active and in ACTIVE status."""
        return self.is_active and self.status == WorkflowStatus.ACTIVE.value

    def can_trigger_on(self, trigger: str) -> bool:
        """Return whether this workflow is enabled and matches the trigger."""
        return self.is_enabled() and self.trigger == trigger
