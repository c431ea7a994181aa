"""Workflow executor: runs every active workflow for a trigger and collects actions.

Entry points for callers that raise business events:

- execute(trigger, context): evaluate all enabled workflows for the
  trigger in priority order, record one execution per evaluated workflow,
  return the aggregate ExecutionResult.
- test(workflow_id, context): dry run of one workflow; nothing recorded.
- validate_logic(tree): save-time structural check of a logic tree.

Neither execute nor test raises: logic failures are contained per
workflow and store failures degrade to "no actions".
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any

from automation.application.dtos.workflow import (
    ExecutionResult,
    LogicValidationResult,
    WorkflowOutcome,
)
from automation.application.interfaces.repositories import IWorkflowRepository
from automation.application.interfaces.services import (
    IEvaluationSandbox,
    IExecutionRecorder,
)
from automation.application.services.logic_validator import LogicValidator
from automation.application.services.trigger_filter import matches_trigger_config
from automation.core.constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_WORKFLOWS_PER_TRIGGER,
)
from automation.domain.entities.workflow import WorkflowEntity
from automation.domain.enums import entity_id_from_context, entity_type_for_trigger
from automation.domain.exceptions import (
    AutomationException,
    EvaluationTimeoutError,
    LogicError,
)
from automation.domain.value_objects import ActionDescriptor
from automation.shared.telemetry.logging import get_logger
from automation.shared.telemetry.tracing import add_span_attributes, traced
from automation.shared.utils.datetime import elapsed_ms

logger = get_logger(__name__)


class WorkflowExecutor:
    """Dispatches a trigger to its workflows through the evaluation sandbox."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        sandbox: IEvaluationSandbox,
        recorder: IExecutionRecorder,
        *,
        validator: LogicValidator | None = None,
        max_workflows: int = DEFAULT_MAX_WORKFLOWS_PER_TRIGGER,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.workflow_repo = workflow_repo
        self.sandbox = sandbox
        self.recorder = recorder
        self.validator = validator or LogicValidator()
        self.max_workflows = max_workflows
        self.max_concurrency = max(1, max_concurrency)

    @traced("workflow.execute")
    async def execute(
        self,
        trigger: str,
        context: Mapping[str, Any],
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
        dry_run: bool = False,
    ) -> ExecutionResult:
        """Evaluate all enabled workflows for trigger against context.

        Args:
            trigger: Trigger kind (WorkflowTrigger or its string value).
            context: Event data the logic trees read through 'var'.
            entity_type: Business object type for audit correlation; derived from trigger when omitted.
            entity_id: Business object id; read from context when omitted.
            dry_run: Evaluate without recording executions or statistics.

        Returns:
            ExecutionResult; success is False only when the batch could not run.
        """
        started = time.perf_counter()
        trigger_value = str(getattr(trigger, "value", trigger))
        logger.info("Executing workflows for trigger: %s", trigger_value)

        try:
            fetched = await self.workflow_repo.get_active_by_trigger(
                trigger_value, self.max_workflows
            )
        except Exception as e:
            logger.exception(
                "Failed to load workflows for trigger %s; no actions applied", trigger_value
            )
            return ExecutionResult(
                success=False,
                execution_time_ms=elapsed_ms(started),
                error=_message(e),
            )

        workflows = [w for w in fetched if w.can_trigger_on(trigger_value)][
            : self.max_workflows
        ]
        if not workflows:
            logger.info("No active workflows found for trigger: %s", trigger_value)
            return ExecutionResult(success=True, execution_time_ms=elapsed_ms(started))
        logger.info("Found %d active workflow(s) for trigger: %s", len(workflows), trigger_value)

        try:
            outcomes = await self._evaluate_all(workflows, context)
            if not dry_run:
                await self._record_all(
                    trigger_value,
                    context,
                    outcomes,
                    entity_type=entity_type or entity_type_for_trigger(trigger_value),
                    entity_id=entity_id or entity_id_from_context(trigger_value, context),
                )
        except Exception as e:
            logger.exception("Fatal error during workflow execution for trigger %s", trigger_value)
            return ExecutionResult(
                success=False,
                execution_time_ms=elapsed_ms(started),
                error=_message(e),
            )

        details = [o.action for o in outcomes if o.action is not None]
        total_ms = elapsed_ms(started)
        add_span_attributes(
            workflows_executed=len(outcomes),
            actions_returned=len(details),
            workflows_failed=sum(1 for o in outcomes if not o.success),
        )
        logger.info(
            "Execution complete for trigger %s (%dms): workflows_executed=%d, actions_returned=%d",
            trigger_value,
            total_ms,
            len(outcomes),
            len(details),
        )
        return ExecutionResult(
            success=True,
            actions=[d.action_type for d in details],
            details=details,
            workflows_executed=len(outcomes),
            execution_time_ms=total_ms,
            outcomes=outcomes,
        )

    @traced("workflow.test")
    async def test(self, workflow_id: str, context: Mapping[str, Any]) -> ExecutionResult:
        """Dry run of a single workflow regardless of its status; nothing is recorded."""
        started = time.perf_counter()
        try:
            workflow = await self.workflow_repo.get_by_id(workflow_id)
        except Exception as e:
            logger.exception("Failed to load workflow %s for test", workflow_id)
            return ExecutionResult(
                success=False, execution_time_ms=elapsed_ms(started), error=_message(e)
            )
        if workflow is None:
            return ExecutionResult(
                success=False,
                execution_time_ms=elapsed_ms(started),
                error="Workflow not found",
            )

        logger.info('Testing workflow "%s" (%s)', workflow.name, workflow.id)
        outcome = await self._evaluate_one(workflow, context)
        if not outcome.success:
            return ExecutionResult(
                success=False,
                execution_time_ms=elapsed_ms(started),
                error=outcome.error,
                outcomes=[outcome],
            )
        details = [outcome.action] if outcome.action is not None else []
        return ExecutionResult(
            success=True,
            actions=[d.action_type for d in details],
            details=details,
            workflows_executed=1,
            execution_time_ms=elapsed_ms(started),
            outcomes=[outcome],
        )

    def validate_logic(self, tree: Any) -> LogicValidationResult:
        return self.validator.validate(tree)

    async def _evaluate_all(
        self, workflows: list[WorkflowEntity], context: Mapping[str, Any]
    ) -> list[WorkflowOutcome]:
        """Filter and evaluate workflows; outcomes keep the input (priority) order.

        Workflows skipped by their trigger filter produce no outcome.
        """
        if self.max_concurrency == 1:
            results = [await self._filter_and_evaluate(w, context) for w in workflows]
            return [o for o in results if o is not None]

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(workflow: WorkflowEntity) -> WorkflowOutcome | None:
            async with semaphore:
                return await self._filter_and_evaluate(workflow, context)

        results = await asyncio.gather(*(bounded(w) for w in workflows))
        return [o for o in results if o is not None]

    async def _filter_and_evaluate(
        self, workflow: WorkflowEntity, context: Mapping[str, Any]
    ) -> WorkflowOutcome | None:
        started = time.perf_counter()
        try:
            fires = matches_trigger_config(workflow.trigger_config, context)
        except LogicError as e:
            return self._failure(workflow, e, started)
        except Exception as e:
            logger.exception('Unexpected error in trigger filter of "%s"', workflow.name)
            return self._failure(
                workflow, LogicError(f"Trigger filter failed: {e}"), started
            )
        if not fires:
            logger.debug('Workflow "%s" skipped by trigger filter', workflow.name)
            return None
        return await self._evaluate_one(workflow, context)

    async def _evaluate_one(
        self, workflow: WorkflowEntity, context: Mapping[str, Any]
    ) -> WorkflowOutcome:
        started = time.perf_counter()
        try:
            value = await self.sandbox.evaluate(workflow.logic_tree, context)
            action = ActionDescriptor.from_result(value)
        except (LogicError, EvaluationTimeoutError) as e:
            return self._failure(workflow, e, started)
        except Exception as e:
            logger.exception('Unexpected error evaluating "%s"', workflow.name)
            return self._failure(workflow, LogicError(f"Logic execution failed: {e}"), started)

        execution_time_ms = elapsed_ms(started)
        if action is not None:
            logger.info(
                '"%s" executed successfully (%dms): action=%s',
                workflow.name,
                execution_time_ms,
                action.action_type,
            )
        return WorkflowOutcome(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            success=True,
            execution_time_ms=execution_time_ms,
            result=action.to_result() if action else None,
        )

    @staticmethod
    def _failure(
        workflow: WorkflowEntity, error: AutomationException, started: float
    ) -> WorkflowOutcome:
        logger.error('Error executing "%s": %s', workflow.name, error.message)
        return WorkflowOutcome(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            success=False,
            execution_time_ms=elapsed_ms(started),
            error=error.message,
            error_code=error.error_code,
        )

    async def _record_all(
        self,
        trigger: str,
        context: Mapping[str, Any],
        outcomes: list[WorkflowOutcome],
        *,
        entity_type: str | None,
        entity_id: str | None,
    ) -> None:
        # Sequential so audit rows are written in priority order.
        for outcome in outcomes:
            await self.recorder.record(
                trigger,
                context,
                outcome,
                entity_type=entity_type,
                entity_id=entity_id,
            )


def _message(error: Exception) -> str:
    if isinstance(error, AutomationException):
        return error.message
    return str(error) or "Unknown error"
