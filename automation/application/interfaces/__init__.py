"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from automation.infrastructure.
"""

from automation.application.interfaces.repositories import (
    IWorkflowExecutionRepository,
    IWorkflowRepository,
)
from automation.application.interfaces.services import (
    IEvaluationSandbox,
    IExecutionRecorder,
)

__all__ = [
    "IEvaluationSandbox",
    "IExecutionRecorder",
    "IWorkflowExecutionRepository",
    "IWorkflowRepository",
]
