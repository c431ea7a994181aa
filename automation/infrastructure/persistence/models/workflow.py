"""Workflow and WorkflowExecution ORM models. Trigger-driven automation."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from automation.domain.enums import WorkflowStatus
from automation.infrastructure.persistence.database import Base
from automation.infrastructure.persistence.models.mixins import (
    AuditedModel,
    CuidMixin,
)


class Workflow(AuditedModel, Base):
    """Workflow definition. Table: workflow. Trigger + logic tree JSON."""

    __tablename__ = "workflow"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    trigger: Mapped[str] = mapped_column(String, nullable=False, index=True)
    trigger_config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    logic_tree: Mapped[Any] = mapped_column(JSON, nullable=False)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.false()
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=WorkflowStatus.DRAFT.value
    )
    execution_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    last_executed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_workflow_trigger_active_priority", "trigger", "is_active", "status", "priority"),
        CheckConstraint(
            "status IN ({})".format(
                ", ".join("'{}'".format(v) for v in WorkflowStatus.values())
            ),
            name="workflow_status_check",
        ),
    )


class WorkflowExecution(CuidMixin, Base):
    """Workflow execution audit (append-only). Table: workflow_execution."""

    __tablename__ = "workflow_execution"

    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    trigger: Mapped[str] = mapped_column(String, nullable=False)
    context_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    result: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_code: Mapped[str | None] = mapped_column(String, nullable=True)
    execution_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    entity_type: Mapped[str | None] = mapped_column(String, nullable=True)
    entity_id: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_workflow_execution_workflow_created", "workflow_id", "created_at"),
        Index("ix_workflow_execution_entity", "entity_type", "entity_id"),
    )
