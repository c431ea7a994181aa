"""Service interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from automation.application.dtos.workflow import WorkflowOutcome


# Isolated, bounded evaluation of untrusted logic trees
class IEvaluationSandbox(Protocol):
    """Protocol for running a logic tree under depth and time limits."""

    async def evaluate(self, tree: Any, context: Mapping[str, Any]) -> Any:
        """Evaluate tree; raise LogicError or EvaluationTimeoutError on failure."""


# Execution audit recorder (fail-open)
class IExecutionRecorder(Protocol):
    """Protocol for recording workflow outcomes; must never raise to the caller."""

    async def record(
        self,
        trigger: str,
        context: Mapping[str, Any],
        outcome: WorkflowOutcome,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> bool:
        """Persist the outcome and bump statistics; return whether the record was written."""
