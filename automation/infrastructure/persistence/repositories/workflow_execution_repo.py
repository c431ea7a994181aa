"""WorkflowExecution repository (implements IWorkflowExecutionRepository).

Writes run in their own transaction per call so a failed audit write
cannot poison the caller's session.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from automation.application.dtos.workflow import WorkflowExecutionCreate
from automation.infrastructure.exceptions import StoreError
from automation.infrastructure.persistence.models.workflow import (
    Workflow,
    WorkflowExecution,
)
from automation.shared.utils.datetime import utc_now


class WorkflowExecutionRepository:
    """Append-only execution audit records plus workflow statistics."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def create_execution(self, data: WorkflowExecutionCreate) -> str:
        execution = WorkflowExecution(
            workflow_id=data.workflow_id,
            trigger=data.trigger,
            context_data=data.context_data,
            success=data.success,
            result=data.result,
            error=data.error,
            error_code=data.error_code,
            execution_time_ms=data.execution_time_ms,
            entity_type=data.entity_type,
            entity_id=data.entity_id,
        )
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    session.add(execution)
                    await session.flush()
                return execution.id
        except SQLAlchemyError as e:
            raise StoreError("create_execution", str(e)) from e

    async def bump_stats(self, workflow_id: str) -> None:
        """Atomic increment; concurrent bumps never need a lock shared with evaluation."""
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await session.execute(
                        update(Workflow)
                        .where(Workflow.id == workflow_id)
                        .values(
                            execution_count=Workflow.execution_count + 1,
                            last_executed_at=utc_now(),
                        )
                    )
        except SQLAlchemyError as e:
            raise StoreError("bump_stats", str(e)) from e

    async def list_for_workflow(
        self, workflow_id: str, limit: int = 50
    ) -> list[WorkflowExecution]:
        """Most recent executions for workflow, newest first."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(WorkflowExecution)
                    .where(WorkflowExecution.workflow_id == workflow_id)
                    .order_by(WorkflowExecution.created_at.desc())
                    .limit(limit)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError("list_for_workflow", str(e)) from e
