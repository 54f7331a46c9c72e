"""
LaunchSense Exceptions.

Centralized exception definitions with:
- Error codes for callers to branch on
- Structured details (field-level where it applies)
- A dict form that the pipeline returns instead of raising
"""

from enum import StrEnum
from typing import Any, Optional


class ErrorCode(StrEnum):
    """Pipeline error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    PIPELINE_ERROR = "PIPELINE_ERROR"
    LEDGER_CONFLICT = "LEDGER_CONFLICT"


class LaunchSenseError(Exception):
    """Base exception for LaunchSense."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PIPELINE_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(LaunchSenseError):
    """Telemetry payload failed the input contract."""

    def __init__(self, details: dict[str, Any]):
        super().__init__(
            message="Decision input failed validation",
            code=ErrorCode.INVALID_INPUT,
            details=details,
        )


class StoreUnavailableError(LaunchSenseError):
    """A data store read (rules, weights, history) failed."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        super().__init__(
            message=f"Data store unavailable during {operation}: {reason}",
            code=ErrorCode.STORE_UNAVAILABLE,
            details={"operation": operation, "reason": reason},
        )


class LedgerConflictError(LaunchSenseError):
    """A ledger entry with the same id already exists."""

    def __init__(self, ledger_id: str):
        super().__init__(
            message=f"Ledger entry {ledger_id} already exists",
            code=ErrorCode.LEDGER_CONFLICT,
            details={"ledger_id": ledger_id},
        )


class PipelineError(LaunchSenseError):
    """A pipeline stage failed."""

    def __init__(self, stage: str, reason: str):
        self.stage = stage
        super().__init__(
            message=f"Pipeline failed at stage {stage}: {reason}",
            code=ErrorCode.PIPELINE_ERROR,
            details={"stage": stage, "reason": reason},
        )
