"""Validates workflow logic trees at save time (before they can be scheduled)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from automation.application.dtos.workflow import LogicValidationResult
from automation.application.services.rule_evaluator import (
    RuleEvaluator,
    check_structure,
    is_operation,
    measure_depth,
    split_operation,
)
from automation.core.constants import DEFAULT_MAX_RECURSION_DEPTH
from automation.domain.enums import WorkflowActionType
from automation.domain.exceptions import LogicError, ValidationException


class LogicValidator:
    """Structural pre-check for logic trees; single responsibility.

    Rejects non-object trees, unknown operators, wrong arity anywhere in
    the tree, action results outside the WorkflowActionType vocabulary,
    trees nested deeper than max_depth, and trees that fail a dry
    evaluation against an empty context.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_RECURSION_DEPTH,
        evaluator: RuleEvaluator | None = None,
    ) -> None:
        self.max_depth = max_depth
        self._evaluator = evaluator or RuleEvaluator()

    def validate(self, tree: Any) -> LogicValidationResult:
        if not isinstance(tree, Mapping):
            return LogicValidationResult(
                valid=False, error="Logic tree must be a JSON object"
            )
        try:
            check_structure(tree)
            check_action_types(tree)
            depth = measure_depth(tree, limit=self.max_depth)
            if depth > self.max_depth:
                raise LogicError(
                    f"Logic tree too deep (max nesting depth is {self.max_depth})"
                )
            self._evaluator.evaluate(tree, {})
        except LogicError as e:
            return LogicValidationResult(valid=False, error=e.message)
        except RecursionError:
            return LogicValidationResult(
                valid=False, error="Logic tree is nested too deeply to evaluate"
            )
        return LogicValidationResult(valid=True)

    def ensure_valid(self, tree: Any) -> None:
        """Raise ValidationException when tree is not a valid logic tree."""
        result = self.validate(tree)
        if not result.valid:
            raise ValidationException(result.error or "Invalid logic tree", field="logic_tree")


def check_action_types(tree: Any) -> None:
    """Raise LogicError when a literal action result names an unknown action type.

    Only literal {"action": ..., "config": ...} mappings are checked; action
    values computed at run time are checked when the result is interpreted.
    """
    known = WorkflowActionType.values()
    stack: list[Any] = [tree]
    while stack:
        node = stack.pop()
        if is_operation(node):
            stack.extend(split_operation(node)[1])
        elif isinstance(node, list):
            stack.extend(node)
        elif isinstance(node, Mapping):
            action = node.get("action")
            if isinstance(action, str) and action and action not in known:
                raise LogicError(f"Unknown action type: {action}")


def validate_logic(tree: Any, max_depth: int = DEFAULT_MAX_RECURSION_DEPTH) -> LogicValidationResult:
    """Validate tree with a LogicValidator using max_depth."""
    return LogicValidator(max_depth=max_depth).validate(tree)
