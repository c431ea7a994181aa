"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from automation.domain.entities import WorkflowEntity
from automation.domain.enums import (
    WorkflowActionType,
    WorkflowStatus,
    WorkflowTrigger,
)
from automation.domain.exceptions import (
    AutomationException,
    EvaluationTimeoutError,
    LogicError,
    ResourceNotFoundException,
    ValidationException,
)
from automation.domain.value_objects import ActionDescriptor

__all__ = [
    # Entities
    "WorkflowEntity",
    # Enums
    "WorkflowActionType",
    "WorkflowStatus",
    "WorkflowTrigger",
    # Exceptions
    "AutomationException",
    "EvaluationTimeoutError",
    "LogicError",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "ActionDescriptor",
]
