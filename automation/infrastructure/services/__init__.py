"""Infrastructure services: evaluation sandbox and execution recorder."""

from automation.infrastructure.services.execution_recorder import ExecutionRecorder
from automation.infrastructure.services.sandbox import EvaluationSandbox

__all__ = ["EvaluationSandbox", "ExecutionRecorder"]
