"""Unit tests for ExecutionRecorder (fail-open audit writes)."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

from automation.application.dtos.workflow import WorkflowOutcome
from automation.infrastructure.services.execution_recorder import ExecutionRecorder, json_snapshot


def _outcome(success: bool = True, **kwargs) -> WorkflowOutcome:
    return WorkflowOutcome(
        workflow_id="wf_1",
        workflow_name="High value orders",
        success=success,
        execution_time_ms=3,
        **kwargs,
    )


def test_json_snapshot_stringifies_non_json_values() -> None:
    """Datetimes and decimals are stored as strings; structure is kept."""
    moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    snapshot = json_snapshot({"at": moment, "amount": Decimal("10.5"), "items": [1, {"a": None}]})

    assert snapshot == {"at": str(moment), "amount": "10.5", "items": [1, {"a": None}]}


async def test_success_writes_record_and_bumps_stats(make_execution_repo) -> None:
    """A successful outcome is recorded and counted."""
    repo = make_execution_repo()
    recorder = ExecutionRecorder(repo)
    outcome = _outcome(result={"action": "FREEZE_ORDER", "config": {}})

    written = await recorder.record("ORDER_CREATED", {"orderId": "o1"}, outcome, entity_type="Order", entity_id="o1")

    assert written is True
    (record,) = repo.records
    assert record.result == {"action": "FREEZE_ORDER", "config": {}}
    assert record.execution_time_ms == 3
    assert (record.entity_type, record.entity_id) == ("Order", "o1")
    assert repo.stats == {"wf_1": 1}


async def test_failure_recorded_without_stats(make_execution_repo) -> None:
    """Failed evaluations are audited but do not bump execution statistics."""
    repo = make_execution_repo()
    outcome = _outcome(success=False, error="Division by zero", error_code="LOGIC_ERROR")

    written = await ExecutionRecorder(repo).record("ORDER_CREATED", {}, outcome)

    assert written is True
    assert repo.records[0].error == "Division by zero"
    assert repo.records[0].result == {}
    assert repo.stats == {}


async def test_write_failure_is_swallowed(make_execution_repo) -> None:
    """Store failures return False and are counted, never raised."""
    repo = make_execution_repo(fail_create=True)
    recorder = ExecutionRecorder(repo)

    written = await recorder.record("ORDER_CREATED", {}, _outcome())

    assert written is False
    assert recorder.failed_writes == 1
    assert repo.stats == {}


async def test_stats_failure_is_swallowed(make_execution_repo) -> None:
    """A failed statistics bump keeps the written record."""
    repo = make_execution_repo(fail_stats=True)
    recorder = ExecutionRecorder(repo)

    written = await recorder.record("ORDER_CREATED", {}, _outcome())

    assert written is True
    assert len(repo.records) == 1
    assert recorder.failed_writes == 1


async def test_unexpected_store_exception_is_swallowed() -> None:
    """Any exception from the sink (not only StoreError) keeps the recorder fail-open."""
    repo = AsyncMock()
    repo.create_execution.side_effect = RuntimeError("event loop closed")
    recorder = ExecutionRecorder(repo)

    written = await recorder.record("ORDER_CREATED", {}, _outcome())

    assert written is False
    repo.bump_stats.assert_not_awaited()
