"""Wiring: build a WorkflowExecutor backed by the SQLAlchemy store and process sandbox."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from automation.application.services.logic_validator import LogicValidator
from automation.application.use_cases.workflow_executor import WorkflowExecutor
from automation.core.config import Settings, get_settings
from automation.infrastructure.persistence.database import get_session_factory
from automation.infrastructure.persistence.repositories import (
    WorkflowExecutionRepository,
    WorkflowRepository,
)
from automation.infrastructure.services.execution_recorder import ExecutionRecorder
from automation.infrastructure.services.sandbox import EvaluationSandbox


def build_workflow_executor(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    settings: Settings | None = None,
) -> WorkflowExecutor:
    """Return a WorkflowExecutor using settings for every engine limit.

    session_factory defaults to the process-wide factory built from DATABASE_URL.
    """
    settings = settings or get_settings()
    factory = session_factory or get_session_factory()
    return WorkflowExecutor(
        WorkflowRepository(factory),
        EvaluationSandbox.from_settings(settings),
        ExecutionRecorder(WorkflowExecutionRepository(factory)),
        validator=LogicValidator(max_depth=settings.workflow_max_recursion_depth),
        max_workflows=settings.workflow_max_per_trigger,
        max_concurrency=settings.workflow_max_concurrency,
    )
