"""Unit tests for the process-isolated evaluation sandbox."""

import os
import time

import pytest

from automation.application.services.rule_evaluator import evaluate
from automation.core.config import Settings
from automation.domain.exceptions import EvaluationTimeoutError, LogicError
from automation.infrastructure.services.sandbox import EvaluationSandbox


def _sleep_forever(tree, context):
    time.sleep(30)


def _exit_abruptly(tree, context):
    os._exit(3)


def _raise_type_error(tree, context):
    raise TypeError("unsupported operand")


def _nested_not(depth: int) -> dict:
    tree: object = True
    for _ in range(depth):
        tree = {"!": [tree]}
    return tree  # type: ignore[return-value]


@pytest.fixture
def sandbox() -> EvaluationSandbox:
    return EvaluationSandbox(timeout_seconds=5.0, max_depth=10)


def test_run_returns_evaluated_value(sandbox: EvaluationSandbox, flag_high_value_tree: dict) -> None:
    """Result from the worker process matches in-process evaluation."""
    context = {"orderAmount": 20000, "userKycStatus": "APPROVED"}
    assert sandbox.run(flag_high_value_tree, context) == evaluate(flag_high_value_tree, context)


async def test_evaluate_is_async_variant(sandbox: EvaluationSandbox) -> None:
    """evaluate() awaits the same result without blocking the loop."""
    assert await sandbox.evaluate({"+": [{"var": "a"}, 2]}, {"a": 1}) == 3.0


def test_logic_error_crosses_process_boundary(sandbox: EvaluationSandbox) -> None:
    """A LogicError raised in the worker surfaces with its message."""
    with pytest.raises(LogicError, match="Division by zero"):
        sandbox.run({"/": [1, 0]}, {})


def test_depth_checked_before_evaluation(sandbox: EvaluationSandbox) -> None:
    """Trees deeper than max_depth are rejected without starting a worker."""
    assert sandbox.run(_nested_not(10), {}) is True
    with pytest.raises(LogicError, match="too deep"):
        sandbox.run(_nested_not(11), {})


def test_unexpected_worker_exception_is_logic_error() -> None:
    """Non-LogicError exceptions inside the worker are classified as LogicError."""
    sandbox = EvaluationSandbox(
        timeout_seconds=5.0, evaluate_fn=_raise_type_error, start_method="fork"
    )
    with pytest.raises(LogicError, match="Logic execution failed: unsupported operand"):
        sandbox.run({"var": "x"}, {})


def test_worker_exit_without_result_is_logic_error() -> None:
    """A worker that dies before answering is a logic failure, not a hang."""
    sandbox = EvaluationSandbox(
        timeout_seconds=5.0, evaluate_fn=_exit_abruptly, start_method="fork"
    )
    with pytest.raises(LogicError, match="exited without a result"):
        sandbox.run({"var": "x"}, {})


@pytest.mark.slow
def test_timeout_terminates_worker() -> None:
    """A tree that runs past the budget raises EvaluationTimeoutError promptly."""
    sandbox = EvaluationSandbox(
        timeout_seconds=0.3, evaluate_fn=_sleep_forever, start_method="fork"
    )
    started = time.monotonic()
    with pytest.raises(EvaluationTimeoutError) as exc_info:
        sandbox.run({"var": "x"}, {})
    assert time.monotonic() - started < 5.0
    assert exc_info.value.message == "Workflow execution timeout (300ms)"


def test_from_settings_uses_engine_limits() -> None:
    """Sandbox limits come from Settings."""
    settings = Settings(
        workflow_execution_timeout_seconds=2.5,
        workflow_max_recursion_depth=4,
        workflow_sandbox_start_method="spawn",
    )
    sandbox = EvaluationSandbox.from_settings(settings)
    assert sandbox.timeout_seconds == 2.5
    assert sandbox.max_depth == 4
    assert sandbox.start_method == "spawn"


def test_default_start_method_does_not_fork_host_threads() -> None:
    """Workers start from a forkserver unless configured otherwise."""
    assert EvaluationSandbox().start_method == "forkserver"
    assert EvaluationSandbox.from_settings(Settings()).start_method == "forkserver"
