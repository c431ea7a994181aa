"""Domain exceptions for the workflow automation engine.

Defines domain-level exceptions for rule evaluation and workflow
definition checks. These exceptions are independent of infrastructure
concerns; store failures live in automation.infrastructure.exceptions.
"""

from typing import Any


class AutomationException(Exception):
    """Base exception for all automation engine errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Callers can rely on message,
    error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, workflow_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class LogicError(AutomationException):
    """Raised when a logic tree cannot be evaluated.

    Covers malformed trees, unknown operators, wrong arity, runtime type
    mismatches and trees nested deeper than the configured limit. Terminal
    for the one workflow being evaluated; the batch continues.
    """

    def __init__(self, message: str, operator: str | None = None) -> None:
        """Initialize with message and optional operator name.

        Args:
            message: Description of the evaluation failure.
            operator: Operator being evaluated when the failure occurred.
        """
        details = {"operator": operator} if operator else {}
        super().__init__(message, "LOGIC_ERROR", details)


class EvaluationTimeoutError(AutomationException):
    """Raised when a logic tree evaluation exceeds its wall-clock budget."""

    def __init__(self, timeout_seconds: float) -> None:
        """Initialize with the budget that was exceeded.

        Args:
            timeout_seconds: Per-evaluation timeout in seconds.
        """
        super().__init__(
            f"Workflow execution timeout ({int(timeout_seconds * 1000)}ms)",
            "EVALUATION_TIMEOUT",
            {"timeout_seconds": timeout_seconds},
        )


class ValidationException(AutomationException):
    """Raised when a workflow definition fails validation at save time."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(AutomationException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workflow').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )
