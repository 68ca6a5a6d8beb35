"""Structured outcome returned by every public workflow operation."""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from domain.errors import WorkflowError

T = TypeVar("T")

INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Either a payload or a typed failure.

    Attributes:
        success: Whether the operation succeeded
        data: Payload on success
        error: Human readable reason on failure
        error_code: Machine readable failure code
        error_type: Name of the failure class
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: WorkflowError) -> "OperationResult":
        return cls(
            success=False,
            error=error.message,
            error_code=error.code,
            error_type=type(error).__name__,
        )

    @classmethod
    def internal_error(cls, message: str = "An unexpected error occurred") -> "OperationResult":
        return cls(success=False, error=message, error_code=INTERNAL_ERROR, error_type="InternalError")

    def __bool__(self) -> bool:
        return self.success
