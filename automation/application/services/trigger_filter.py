"""Trigger filter: decides whether a workflow's trigger should fire for an event.

A workflow may carry an optional trigger_config that narrows which events
of its trigger kind it reacts to, before the logic tree is evaluated:

    {"enabled": true, "logic": "AND", "filters": [
        {"field": "user.country", "operator": "in", "value": ["PL", "DE"]}
    ]}

Missing, disabled or empty configs always fire. A config that is not an
object, or whose filters are not a list, raises LogicError so the caller
can fail that one workflow.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from automation.core.constants import VAR_PATH_SEP
from automation.domain.exceptions import LogicError
from automation.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_NUMERIC_OPERATORS = frozenset({">", "<", ">=", "<="})


def get_nested_value(data: Mapping[str, Any], path: str) -> Any:
    """Return the value at a dotted path (e.g. 'user.country'), or None when missing."""
    current: Any = data
    for key in path.split(VAR_PATH_SEP):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def evaluate_filter(rule: Mapping[str, Any], data: Mapping[str, Any]) -> bool:
    """Evaluate one {field, operator, value} filter against data."""
    operator = rule.get("operator")
    field = rule.get("field")
    if not isinstance(field, str) or not field:
        logger.warning("Trigger filter without field ignored as non-matching: %r", rule)
        return False
    actual = get_nested_value(data, field)
    expected = rule.get("value")

    if actual is None:
        return operator in ("!=", "not_in")

    if operator == "==":
        return actual == expected
    if operator == "!=":
        return actual != expected
    if operator in _NUMERIC_OPERATORS:
        left, right = _to_number(actual), _to_number(expected)
        if left is None or right is None:
            return False
        if operator == ">":
            return left > right
        if operator == "<":
            return left < right
        if operator == ">=":
            return left >= right
        return left <= right
    if operator == "in":
        return isinstance(expected, list) and actual in expected
    if operator == "not_in":
        return not isinstance(expected, list) or actual not in expected
    if operator in ("contains", "not_contains", "starts_with", "ends_with"):
        haystack = str(actual).lower()
        needle = str(expected).lower()
        if operator == "contains":
            return needle in haystack
        if operator == "not_contains":
            return needle not in haystack
        if operator == "starts_with":
            return haystack.startswith(needle)
        return haystack.endswith(needle)
    if operator == "between":
        if not isinstance(expected, list) or len(expected) != 2:
            return False
        value = _to_number(actual)
        low, high = _to_number(expected[0]), _to_number(expected[1])
        if value is None or low is None or high is None:
            return False
        return low <= value <= high

    logger.warning("Unknown trigger filter operator: %r", operator)
    return False


def matches_trigger_config(
    config: Mapping[str, Any] | None, context: Mapping[str, Any]
) -> bool:
    """Return whether the trigger should fire for context under config.

    logic 'AND' requires every filter to match; anything else means OR.

    Raises:
        LogicError: config is not a mapping or its filters are not a list.
    """
    if config is None:
        return True
    if not isinstance(config, Mapping):
        raise LogicError(
            f"Trigger config must be an object, got {type(config).__name__}"
        )
    if not config.get("enabled"):
        return True
    filters = config.get("filters")
    if filters is None:
        return True
    if not isinstance(filters, list):
        raise LogicError(
            f"Trigger config filters must be a list, got {type(filters).__name__}"
        )
    if not filters:
        return True
    results = [
        evaluate_filter(rule, context) if isinstance(rule, Mapping) else False
        for rule in filters
    ]
    if config.get("logic") == "AND":
        return all(results)
    return any(results)
