"""Evaluation sandbox: runs admin-authored logic trees under depth and time limits.

Implements IEvaluationSandbox. The nesting depth is checked structurally
in the calling process before anything runs. Evaluation itself happens in
a separate OS process connected by a pipe, so a tree that exceeds its
wall-clock budget is terminated rather than left running. Every failure
is classified as LogicError or EvaluationTimeoutError; both are terminal
for one workflow only.
"""

from __future__ import annotations

import asyncio
import multiprocessing
from collections.abc import Callable, Mapping
from multiprocessing.connection import Connection
from typing import Any

from automation.application.services.rule_evaluator import evaluate, measure_depth
from automation.core.config import Settings, get_settings
from automation.core.constants import (
    DEFAULT_EXECUTION_TIMEOUT_SECONDS,
    DEFAULT_MAX_RECURSION_DEPTH,
    DEFAULT_SANDBOX_START_METHOD,
)
from automation.domain.exceptions import EvaluationTimeoutError, LogicError
from automation.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Modules imported once by the forkserver so each worker starts warm.
_FORKSERVER_PRELOAD = ["automation.application.services.rule_evaluator"]

# Seconds to wait for a terminated worker before killing it.
_TERMINATE_GRACE_SECONDS = 1.0

_OK = "ok"
_ERROR = "error"


def _worker_main(
    conn: Connection,
    evaluate_fn: Callable[[Any, Mapping[str, Any]], Any],
    tree: Any,
    context: Mapping[str, Any],
) -> None:
    """Worker process entry point: evaluate and send (status, payload) back."""
    try:
        try:
            value = evaluate_fn(tree, context)
        except LogicError as e:
            conn.send((_ERROR, e.message))
        except Exception as e:
            # Anything the interpreter raises is a logic failure for this tree.
            conn.send((_ERROR, f"Logic execution failed: {e}"))
        else:
            conn.send((_OK, value))
    finally:
        conn.close()


class EvaluationSandbox:
    """Runs RuleEvaluator in a killable worker process with depth and timeout guards.

    With the spawn and forkserver start methods evaluate_fn is pickled, so it
    must be a module-level function.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_EXECUTION_TIMEOUT_SECONDS,
        max_depth: int = DEFAULT_MAX_RECURSION_DEPTH,
        *,
        start_method: str = DEFAULT_SANDBOX_START_METHOD,
        evaluate_fn: Callable[[Any, Mapping[str, Any]], Any] | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_depth = max_depth
        self.start_method = start_method
        self._mp = multiprocessing.get_context(start_method)
        if start_method == "forkserver":
            self._mp.set_forkserver_preload(_FORKSERVER_PRELOAD)
        self._evaluate_fn = evaluate_fn or evaluate

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> EvaluationSandbox:
        settings = settings or get_settings()
        return cls(
            timeout_seconds=settings.workflow_execution_timeout_seconds,
            max_depth=settings.workflow_max_recursion_depth,
            start_method=settings.workflow_sandbox_start_method,
        )

    def check_depth(self, tree: Any) -> None:
        """Raise LogicError when tree nests operations deeper than max_depth."""
        depth = measure_depth(tree, limit=self.max_depth)
        if depth > self.max_depth:
            raise LogicError(
                f"Logic tree too deep (max nesting depth is {self.max_depth})"
            )

    def run(self, tree: Any, context: Mapping[str, Any]) -> Any:
        """Evaluate tree against context in a worker process (blocking).

        Raises:
            LogicError: Tree too deep, malformed, or failed at runtime.
            EvaluationTimeoutError: Worker did not answer within timeout_seconds.
        """
        self.check_depth(tree)
        reader, writer = self._mp.Pipe(duplex=False)
        process = self._mp.Process(
            target=_worker_main,
            args=(writer, self._evaluate_fn, tree, dict(context)),
            daemon=True,
        )
        process.start()
        writer.close()
        try:
            if not reader.poll(self.timeout_seconds):
                logger.warning(
                    "Logic evaluation exceeded %.2fs; terminating worker pid=%s",
                    self.timeout_seconds,
                    process.pid,
                )
                raise EvaluationTimeoutError(self.timeout_seconds)
            try:
                status, payload = reader.recv()
            except EOFError as e:
                raise LogicError(
                    f"Evaluation worker exited without a result (exit code {process.exitcode})"
                ) from e
        finally:
            reader.close()
            self._stop(process)
        if status == _ERROR:
            raise LogicError(payload)
        return payload

    async def evaluate(self, tree: Any, context: Mapping[str, Any]) -> Any:
        """Async variant of run; the blocking wait happens in a worker thread."""
        return await asyncio.to_thread(self.run, tree, context)

    @staticmethod
    def _stop(process: multiprocessing.process.BaseProcess) -> None:
        if process.is_alive():
            process.terminate()
            process.join(_TERMINATE_GRACE_SECONDS)
            if process.is_alive():
                process.kill()
        process.join()
