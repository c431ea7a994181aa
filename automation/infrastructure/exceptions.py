"""Infrastructure exceptions for the workflow store and audit sink.

Store errors extend AutomationException so callers can log them
consistently. The engine never lets them reach the triggering caller.
"""

from automation.domain.exceptions import AutomationException


class StoreError(AutomationException):
    """Workflow store or audit sink operation failed."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Workflow store operation '{operation}' failed: {reason}",
            "STORE_ERROR",
            {"operation": operation, "reason": reason},
        )
