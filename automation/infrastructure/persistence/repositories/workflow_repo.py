"""Workflow repository (implements IWorkflowRepository)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from automation.application.services.logic_validator import LogicValidator
from automation.domain.entities.workflow import WorkflowEntity
from automation.domain.enums import WorkflowStatus
from automation.infrastructure.exceptions import StoreError
from automation.infrastructure.persistence.models.workflow import Workflow
from automation.shared.utils.datetime import ensure_utc


def _to_entity(w: Workflow) -> WorkflowEntity:
    return WorkflowEntity(
        id=w.id,
        name=w.name,
        description=w.description,
        trigger=w.trigger,
        trigger_config=w.trigger_config,
        logic_tree=w.logic_tree,
        priority=w.priority,
        is_active=w.is_active,
        status=w.status,
        execution_count=w.execution_count,
        last_executed_at=ensure_utc(w.last_executed_at),
        version=w.version,
        created_at=ensure_utc(w.created_at),
    )


class WorkflowRepository:
    """Read-side workflow repository; each call uses its own short session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_active_by_trigger(
        self, trigger: str, limit: int
    ) -> list[WorkflowEntity]:
        """Enabled workflows for trigger, priority descending.

        Equal priorities keep creation order (created_at, then id).
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Workflow)
                    .where(
                        Workflow.trigger == trigger,
                        Workflow.is_active.is_(True),
                        Workflow.status == WorkflowStatus.ACTIVE.value,
                    )
                    .order_by(
                        Workflow.priority.desc(),
                        Workflow.created_at.asc(),
                        Workflow.id.asc(),
                    )
                    .limit(limit)
                )
                return [_to_entity(w) for w in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StoreError("get_active_by_trigger", str(e)) from e

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        try:
            async with self.session_factory() as session:
                workflow = await session.get(Workflow, workflow_id)
                return _to_entity(workflow) if workflow else None
        except SQLAlchemyError as e:
            raise StoreError("get_by_id", str(e)) from e

    async def create_workflow(
        self,
        name: str,
        trigger: str,
        logic_tree: Any,
        *,
        priority: int = 0,
        is_active: bool = False,
        status: str = WorkflowStatus.DRAFT.value,
        trigger_config: dict[str, Any] | None = None,
        description: str | None = None,
        validator: LogicValidator | None = None,
    ) -> WorkflowEntity:
        """Create workflow; logic_tree is validated first (raises ValidationException)."""
        (validator or LogicValidator()).ensure_valid(logic_tree)
        workflow = Workflow(
            name=name,
            description=description,
            trigger=trigger,
            trigger_config=trigger_config,
            logic_tree=logic_tree,
            priority=priority,
            is_active=is_active,
            status=status,
        )
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    session.add(workflow)
                    await session.flush()
                    await session.refresh(workflow)
                return _to_entity(workflow)
        except SQLAlchemyError as e:
            raise StoreError("create_workflow", str(e)) from e
