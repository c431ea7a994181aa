"""Rule evaluator: pure interpreter for workflow logic trees.

A logic tree is JSON data. A mapping with exactly one key is an operation
({operator: operands}); a non-list operand is shorthand for a one-item
list. Mappings with any other number of keys are literal data, so an
action result such as {"action": "FLAG_FOR_REVIEW", "config": {}} is
returned as-is. Lists are evaluated element-wise; everything else is a
literal.

Evaluation never mutates the tree or the context and performs no I/O.
Results never alias either: literal mappings and values read through
'var' are returned as copies.
Depth and time bounds are enforced by the evaluation sandbox, not here.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Callable, Mapping
from typing import Any

from automation.core.constants import VAR_PATH_SEP
from automation.domain.exceptions import LogicError

# operator -> (min operands, max operands or None for unbounded)
_ARITY: dict[str, tuple[int, int | None]] = {
    "var": (0, 2),
    "==": (2, 2),
    "===": (2, 2),
    "!=": (2, 2),
    "!==": (2, 2),
    ">": (2, 2),
    ">=": (2, 2),
    "<": (2, 3),
    "<=": (2, 3),
    "and": (1, None),
    "or": (1, None),
    "!": (1, 1),
    "!!": (1, 1),
    "in": (2, 2),
    "!in": (2, 2),
    "if": (0, None),
    "?:": (0, None),
    "+": (1, None),
    "-": (1, 2),
    "*": (1, None),
    "/": (2, 2),
    "%": (2, 2),
    "min": (1, None),
    "max": (1, None),
}

OPERATORS = frozenset(_ARITY)

# Operators that receive unevaluated operands (short-circuit / lazy branches).
_LAZY = frozenset({"and", "or", "if", "?:"})


def is_operation(node: Any) -> bool:
    """Return whether node is an operation (single-key mapping with a string key)."""
    return (
        isinstance(node, Mapping)
        and len(node) == 1
        and isinstance(next(iter(node)), str)
    )


def split_operation(node: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Return (operator, operands) for an operation node."""
    op, raw = next(iter(node.items()))
    operands = list(raw) if isinstance(raw, list) else [raw]
    return op, operands


def is_truthy(value: Any) -> bool:
    """Truthiness used by boolean operators: empty lists are falsy."""
    if isinstance(value, list):
        return len(value) > 0
    return bool(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(a: Any, b: Any) -> bool:
    """Equality without coercion: numbers compare as floats, mismatched types are unequal."""
    if _is_number(a) and _is_number(b):
        return float(a) == float(b)
    if type(a) is not type(b):
        return False
    return a == b


def _ordered(op: str, a: Any, b: Any) -> bool:
    """Ordering comparison; mismatched or non-scalar types compare False."""
    if _is_number(a) and _is_number(b):
        a, b = float(a), float(b)
    elif not (isinstance(a, str) and isinstance(b, str)):
        return False
    if op == "<":
        return a < b
    if op == "<=":
        return a <= b
    if op == ">":
        return a > b
    return a >= b


def _detached(value: Any) -> Any:
    """Deep copy of containers so results never share state with tree or context."""
    if isinstance(value, (Mapping, list)):
        return copy.deepcopy(value)
    return value


def measure_depth(tree: Any, limit: int | None = None) -> int:
    """Return operation nesting depth of tree (root operation = 1, literals = 0).

    Walks iteratively so arbitrarily deep input cannot exhaust the stack.
    When limit is given, stops as soon as depth exceeds it.
    """
    deepest = 0
    stack: list[tuple[Any, int]] = [(tree, 0)]
    while stack:
        node, depth = stack.pop()
        if is_operation(node):
            depth += 1
            deepest = max(deepest, depth)
            if limit is not None and deepest > limit:
                return deepest
            _, operands = split_operation(node)
            stack.extend((operand, depth) for operand in operands)
        elif isinstance(node, list):
            stack.extend((item, depth) for item in node)
    return deepest


def check_structure(tree: Any) -> None:
    """Check every operation in tree (including untaken branches) for name and arity.

    Raises:
        LogicError: On the first unknown operator or wrong operand count.
    """
    stack: list[Any] = [tree]
    while stack:
        node = stack.pop()
        if is_operation(node):
            op, operands = split_operation(node)
            _check_arity(op, operands)
            stack.extend(operands)
        elif isinstance(node, list):
            stack.extend(node)


def _check_arity(op: str, operands: list[Any]) -> None:
    if op not in _ARITY:
        raise LogicError(f"Unrecognized operation {op}", operator=op)
    low, high = _ARITY[op]
    count = len(operands)
    if count < low or (high is not None and count > high):
        expected = f"{low}" if low == high else f"{low}..{high if high is not None else 'n'}"
        raise LogicError(
            f"Operator '{op}' expects {expected} operand(s), got {count}",
            operator=op,
        )


class RuleEvaluator:
    """Evaluates a logic tree against a context mapping. Stateless and reentrant."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[list[Any], Mapping[str, Any]], Any]] = {
            "var": self._var,
            "==": lambda a, _c: values_equal(a[0], a[1]),
            "===": lambda a, _c: values_equal(a[0], a[1]),
            "!=": lambda a, _c: not values_equal(a[0], a[1]),
            "!==": lambda a, _c: not values_equal(a[0], a[1]),
            ">": lambda a, _c: _ordered(">", a[0], a[1]),
            ">=": lambda a, _c: _ordered(">=", a[0], a[1]),
            "<": lambda a, _c: self._between("<", a),
            "<=": lambda a, _c: self._between("<=", a),
            "and": self._and,
            "or": self._or,
            "!": lambda a, _c: not is_truthy(a[0]),
            "!!": lambda a, _c: is_truthy(a[0]),
            "in": lambda a, _c: self._contains(a[0], a[1]),
            "!in": lambda a, _c: not self._contains(a[0], a[1]),
            "if": self._if,
            "?:": self._if,
            "+": lambda a, _c: self._arithmetic("+", a),
            "-": lambda a, _c: self._arithmetic("-", a),
            "*": lambda a, _c: self._arithmetic("*", a),
            "/": lambda a, _c: self._arithmetic("/", a),
            "%": lambda a, _c: self._arithmetic("%", a),
            "min": lambda a, _c: self._arithmetic("min", a),
            "max": lambda a, _c: self._arithmetic("max", a),
        }

    def evaluate(self, tree: Any, context: Mapping[str, Any] | None = None) -> Any:
        """Evaluate tree against context and return the resulting value.

        Raises:
            LogicError: Unknown operator, wrong arity, or operand type mismatch.
        """
        return self._eval(tree, context if context is not None else {})

    def _eval(self, node: Any, context: Mapping[str, Any]) -> Any:
        if isinstance(node, list):
            return [self._eval(item, context) for item in node]
        if not is_operation(node):
            return _detached(node)
        op, operands = split_operation(node)
        _check_arity(op, operands)
        if op not in _LAZY:
            operands = [self._eval(operand, context) for operand in operands]
        return self._handlers[op](operands, context)

    def _var(self, args: list[Any], context: Mapping[str, Any]) -> Any:
        path = args[0] if args else ""
        default = args[1] if len(args) > 1 else None
        if path is None or path == "":
            return _detached(context)
        if isinstance(path, bool) or not isinstance(path, (str, int)):
            raise LogicError(
                f"Variable path must be a string, got {type(path).__name__}",
                operator="var",
            )
        current: Any = context
        for key in str(path).split(VAR_PATH_SEP):
            if isinstance(current, Mapping):
                current = current.get(key)
            elif isinstance(current, list) and key.isdigit():
                index = int(key)
                current = current[index] if index < len(current) else None
            else:
                return default
            if current is None:
                return default
        return _detached(current)

    def _and(self, operands: list[Any], context: Mapping[str, Any]) -> Any:
        value = None
        for operand in operands:
            value = self._eval(operand, context)
            if not is_truthy(value):
                return value
        return value

    def _or(self, operands: list[Any], context: Mapping[str, Any]) -> Any:
        value = None
        for operand in operands:
            value = self._eval(operand, context)
            if is_truthy(value):
                return value
        return value

    def _if(self, operands: list[Any], context: Mapping[str, Any]) -> Any:
        # [cond1, value1, cond2, value2, ..., else]
        for i in range(0, len(operands) - 1, 2):
            if is_truthy(self._eval(operands[i], context)):
                return self._eval(operands[i + 1], context)
        if len(operands) % 2 == 1:
            return self._eval(operands[-1], context)
        return None

    @staticmethod
    def _between(op: str, args: list[Any]) -> bool:
        if len(args) == 3:
            return _ordered(op, args[0], args[1]) and _ordered(op, args[1], args[2])
        return _ordered(op, args[0], args[1])

    @staticmethod
    def _contains(needle: Any, haystack: Any) -> bool:
        if isinstance(haystack, list):
            return any(values_equal(needle, item) for item in haystack)
        if isinstance(haystack, str) and isinstance(needle, str):
            return needle in haystack
        return False

    @staticmethod
    def _arithmetic(op: str, args: list[Any]) -> float | None:
        if any(arg is None for arg in args):
            # Unresolved variable: no value rather than an error.
            return None
        for arg in args:
            if not _is_number(arg):
                raise LogicError(
                    f"Operator '{op}' expects numeric operands, got {type(arg).__name__}",
                    operator=op,
                )
        numbers = [float(arg) for arg in args]
        if op == "+":
            return math.fsum(numbers)
        if op == "*":
            return math.prod(numbers)
        if op == "-":
            return -numbers[0] if len(numbers) == 1 else numbers[0] - numbers[1]
        if op == "min":
            return min(numbers)
        if op == "max":
            return max(numbers)
        if numbers[1] == 0:
            raise LogicError("Division by zero", operator=op)
        if op == "/":
            return numbers[0] / numbers[1]
        return math.fmod(numbers[0], numbers[1])


_default_evaluator = RuleEvaluator()


def evaluate(tree: Any, context: Mapping[str, Any] | None = None) -> Any:
    """Evaluate tree with a shared stateless RuleEvaluator."""
    return _default_evaluator.evaluate(tree, context)
