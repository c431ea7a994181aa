"""Execution recorder: persists one audit record per workflow evaluation (implements IExecutionRecorder).

Fail-open: the business transaction that raised the trigger must never
fail because the automation audit trail could not be written. Store
failures are logged and counted, never raised.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from automation.application.dtos.workflow import WorkflowExecutionCreate, WorkflowOutcome
from automation.application.interfaces.repositories import IWorkflowExecutionRepository
from automation.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def json_snapshot(value: Mapping[str, Any]) -> dict[str, Any]:
    """Verbatim JSON-safe copy of the context (datetimes and other objects become strings)."""
    return json.loads(json.dumps(dict(value), default=str))


class ExecutionRecorder:
    """Turns WorkflowOutcome into a WorkflowExecution record plus a statistics bump."""

    def __init__(self, execution_repo: IWorkflowExecutionRepository) -> None:
        self.execution_repo = execution_repo
        self.failed_writes = 0

    async def record(
        self,
        trigger: str,
        context: Mapping[str, Any],
        outcome: WorkflowOutcome,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> bool:
        """Persist outcome; bump statistics after a successful evaluation.

        Returns:
            True when the execution record was written, False otherwise.
        """
        trigger_value = str(getattr(trigger, "value", trigger))
        try:
            data = WorkflowExecutionCreate(
                workflow_id=outcome.workflow_id,
                trigger=trigger_value,
                context_data=json_snapshot(context),
                success=outcome.success,
                result=json_snapshot(outcome.result) if outcome.result else {},
                execution_time_ms=outcome.execution_time_ms,
                error=outcome.error,
                error_code=outcome.error_code,
                entity_type=entity_type,
                entity_id=entity_id,
            )
            await self.execution_repo.create_execution(data)
        except Exception:
            self.failed_writes += 1
            logger.exception(
                "Failed to record execution for workflow %s (trigger=%s); continuing",
                outcome.workflow_id,
                trigger_value,
            )
            return False

        if outcome.success:
            try:
                await self.execution_repo.bump_stats(outcome.workflow_id)
            except Exception:
                self.failed_writes += 1
                logger.exception(
                    "Failed to update statistics for workflow %s; continuing",
                    outcome.workflow_id,
                )
        return True
