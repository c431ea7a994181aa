"""Domain value objects for the workflow automation engine.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from automation.domain.enums import WorkflowActionType
from automation.domain.exceptions import LogicError


@dataclass(frozen=True)
class ActionDescriptor:
    """Action a workflow decided on: action type plus an opaque config mapping.

    The config is passed through unvalidated; typed validation belongs to
    whichever downstream component executes the action.
    """

    action_type: str
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.action_type, str) or not self.action_type:
            raise ValueError("Action type must be a non-empty string")

    @classmethod
    def from_result(cls, value: Any) -> "ActionDescriptor | None":
        """Interpret an evaluation result as an action.

        A mapping with a non-empty string 'action' key is an action; its
        'config' (missing or null means {}) must be a mapping. Anything else,
        including None and falsy values, means no action was triggered.

        Raises:
            LogicError: The action is not a WorkflowActionType value.
        """
        if not isinstance(value, Mapping):
            return None
        action = value.get("action")
        if not isinstance(action, str) or not action:
            return None
        if action not in WorkflowActionType.values():
            raise LogicError(f"Unknown action type: {action}")
        config = value.get("config") or {}
        if not isinstance(config, Mapping):
            return None
        return cls(action_type=action, config=dict(config))

    def to_result(self) -> dict[str, Any]:
        """Serialize in the logic-tree output shape ({action, config})."""
        return {"action": self.action_type, "config": dict(self.config)}
