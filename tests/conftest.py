"""Pytest configuration and fixtures for the automation engine.

Unit tests use in-memory repositories and an in-process sandbox; sandbox
and timeout behaviour is tested against the real process sandbox.
"""

import copy
from collections.abc import Mapping
from typing import Any

import pytest

from automation.application.dtos.workflow import WorkflowExecutionCreate
from automation.application.services.rule_evaluator import evaluate
from automation.application.use_cases.workflow_executor import WorkflowExecutor
from automation.domain.entities.workflow import WorkflowEntity
from automation.domain.enums import WorkflowStatus
from automation.infrastructure.exceptions import StoreError
from automation.infrastructure.services.execution_recorder import ExecutionRecorder
from automation.infrastructure.services.sandbox import EvaluationSandbox

# IF orderAmount > 10000 AND userKycStatus == APPROVED THEN FLAG_FOR_REVIEW
_FLAG_HIGH_VALUE_TREE = {
    "if": [
        {
            "and": [
                {">": [{"var": "orderAmount"}, 10000]},
                {"==": [{"var": "userKycStatus"}, "APPROVED"]},
            ]
        },
        {"action": "FLAG_FOR_REVIEW", "config": {}},
        None,
    ]
}


def _action_tree(action: str, config: dict | None = None) -> dict:
    """Tree that always emits action."""
    return {"if": [True, {"action": action, "config": config or {}}, None]}


def _make_workflow(
    workflow_id: str,
    logic_tree: Any,
    *,
    priority: int = 0,
    trigger: str = "ORDER_CREATED",
    is_active: bool = True,
    status: str = WorkflowStatus.ACTIVE.value,
    trigger_config: dict | None = None,
) -> WorkflowEntity:
    return WorkflowEntity(
        id=workflow_id,
        name=f"Workflow {workflow_id}",
        trigger=trigger,
        logic_tree=logic_tree,
        priority=priority,
        is_active=is_active,
        status=status,
        trigger_config=trigger_config,
    )


class InMemoryWorkflowRepo:
    """IWorkflowRepository over a list; stable sort keeps insertion order for equal priority."""

    def __init__(self, workflows: list[WorkflowEntity] | None = None, *, fail: bool = False) -> None:
        self.workflows = list(workflows or [])
        self.fail = fail
        self.limits: list[int] = []

    async def get_active_by_trigger(self, trigger: str, limit: int) -> list[WorkflowEntity]:
        self.limits.append(limit)
        if self.fail:
            raise StoreError("get_active_by_trigger", "connection refused")
        active = [w for w in self.workflows if w.can_trigger_on(trigger)]
        return sorted(active, key=lambda w: -w.priority)[:limit]

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        if self.fail:
            raise StoreError("get_by_id", "connection refused")
        return next((w for w in self.workflows if w.id == workflow_id), None)


class InMemoryExecutionRepo:
    """IWorkflowExecutionRepository collecting records; can be told to fail."""

    def __init__(self, *, fail_create: bool = False, fail_stats: bool = False) -> None:
        self.records: list[WorkflowExecutionCreate] = []
        self.stats: dict[str, int] = {}
        self.fail_create = fail_create
        self.fail_stats = fail_stats

    async def create_execution(self, data: WorkflowExecutionCreate) -> str:
        if self.fail_create:
            raise StoreError("create_execution", "disk full")
        self.records.append(data)
        return f"exec-{len(self.records)}"

    async def bump_stats(self, workflow_id: str) -> None:
        if self.fail_stats:
            raise StoreError("bump_stats", "deadlock detected")
        self.stats[workflow_id] = self.stats.get(workflow_id, 0) + 1


class InlineSandbox:
    """IEvaluationSandbox that evaluates in-process (depth checked, no timeout)."""

    def __init__(self, max_depth: int = 10) -> None:
        self._depth_guard = EvaluationSandbox(max_depth=max_depth)

    async def evaluate(self, tree: Any, context: Mapping[str, Any]) -> Any:
        self._depth_guard.check_depth(tree)
        return evaluate(tree, context)


@pytest.fixture
def execution_repo() -> InMemoryExecutionRepo:
    return InMemoryExecutionRepo()


@pytest.fixture
def make_executor(execution_repo: InMemoryExecutionRepo):
    """Build a WorkflowExecutor over the given workflows (in-process sandbox by default)."""

    def _make(
        workflows: list[WorkflowEntity] | None = None,
        *,
        sandbox: Any = None,
        workflow_repo: Any = None,
        recorder: Any = None,
        **kwargs: Any,
    ) -> WorkflowExecutor:
        return WorkflowExecutor(
            workflow_repo or InMemoryWorkflowRepo(workflows),
            sandbox or InlineSandbox(),
            recorder or ExecutionRecorder(execution_repo),
            **kwargs,
        )

    return _make


@pytest.fixture
def flag_high_value_tree() -> dict:
    return copy.deepcopy(_FLAG_HIGH_VALUE_TREE)


@pytest.fixture
def action_tree():
    return _action_tree


@pytest.fixture
def make_workflow():
    return _make_workflow


@pytest.fixture
def make_workflow_repo():
    return InMemoryWorkflowRepo


@pytest.fixture
def make_execution_repo():
    return InMemoryExecutionRepo
