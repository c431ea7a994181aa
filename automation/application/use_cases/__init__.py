"""Use cases: orchestration of services behind the engine's public contract."""

from automation.application.use_cases.workflow_executor import WorkflowExecutor

__all__ = ["WorkflowExecutor"]
