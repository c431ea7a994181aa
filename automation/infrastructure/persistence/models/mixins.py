"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, VersionedMixin and the combined
AuditedModel.
"""

from datetime import datetime

from cuid2 import cuid_wrapper
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

# Collision-resistant primary keys (CUID2), generated client-side on insert.
generate_cuid = cuid_wrapper()


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class VersionedMixin:
    """Mixin for optimistic locking: version integer, default 1."""

    @declared_attr
    def version(cls) -> Mapped[int]:
        return mapped_column(Integer, default=1, nullable=False)


class AuditedModel(CuidMixin, TimestampMixin, VersionedMixin):
    """Combined mixin: CUID + created_at/updated_at + version."""

    __abstract__ = True
