"""Seed workflow definitions from a JSON file into the workflow store.

Each entry is validated as a WorkflowDefinition (logic tree included)
before it is written; invalid entries are reported and skipped. Tables
are created if missing.

Usage:
    python -m scripts.seed_workflows [path/to/workflows.json]

Default path: scripts/seed-workflows.json (relative to project root).
Requires: DATABASE_URL (e.g. sqlite+aiosqlite:///./automation.db).
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from automation.core.config import get_settings
from automation.infrastructure.persistence.database import build_session_factory, create_all
from automation.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository
from automation.schemas.workflow import WorkflowDefinition
from automation.shared.telemetry.logging import setup_logging


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def seed(
    entries: list[dict], session_factory: async_sessionmaker[AsyncSession]
) -> list[str]:
    """Create one workflow per valid entry; return the created ids."""
    repo = WorkflowRepository(session_factory)
    created: list[str] = []
    for entry in entries:
        try:
            definition = WorkflowDefinition.model_validate(entry)
        except ValidationError as e:
            print(f"  Skip workflow {entry.get('name')!r}: {e}", file=sys.stderr)
            continue
        workflow = await repo.create_workflow(
            definition.name,
            definition.trigger,
            definition.logic_tree,
            priority=definition.priority,
            is_active=definition.is_active,
            status=str(getattr(definition.status, "value", definition.status)),
            trigger_config=(
                definition.trigger_config.model_dump() if definition.trigger_config else None
            ),
            description=definition.description,
        )
        print(f"  Workflow {workflow.name} ({workflow.trigger}, priority {workflow.priority}) -> {workflow.id}")
        created.append(workflow.id)
    return created


async def run(path: Path) -> None:
    _load_env()
    get_settings.cache_clear()
    settings = get_settings()
    setup_logging(settings)
    if not settings.database_url:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)
    entries = json.loads(path.read_text(encoding="utf-8"))
    engine, factory = build_session_factory(settings.database_url, echo=settings.database_echo)
    try:
        await create_all(engine)
        created = await seed(entries.get("workflows", []), factory)
    finally:
        await engine.dispose()
    print(f"Seed completed: {len(created)} workflow(s).")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-workflows.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
