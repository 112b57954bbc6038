"""Error models and exception classes for disposable containers."""

from typing import Optional, List
from pydantic import BaseModel, Field
from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration."""

    SPEC = "spec"
    RUNTIME_CALL = "runtime_call"
    LAUNCH_RETRY_EXHAUSTED = "launch_retry_exhausted"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: Optional[str] = Field(None, description="Builder field the error refers to")
    message: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")


# Custom Exception Classes


class DisposableException(Exception):
    """Base exception for disposable containers."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.RUNTIME_CALL,
        details: Optional[List[ErrorDetail]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or []
        super().__init__(message)


class SpecError(DisposableException):
    """Malformed or missing builder input.

    Raised immediately and never retried, e.g. asking for a URL when no
    protocol was declared and the image has no known default.
    """

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or (
            [ErrorDetail(field=field, message=message)] if field else None
        )
        super().__init__(
            message=message, error_type=ErrorType.SPEC, details=details, **kwargs
        )


class RuntimeCallError(DisposableException):
    """A create/start/inspect/stop call against the daemon failed."""

    def __init__(
        self,
        operation: str,
        message: str = None,
        container_id: Optional[str] = None,
        **kwargs,
    ):
        self.operation = operation
        self.container_id = container_id
        error_message = message or f"Container runtime call '{operation}' failed"
        kwargs.setdefault("error_type", ErrorType.RUNTIME_CALL)
        super().__init__(message=error_message, **kwargs)


class LaunchRetryExhausted(RuntimeCallError):
    """The command-line launch kept failing until the retry budget ran out."""

    def __init__(
        self,
        operation: str,
        attempts: int,
        last_returncode: Optional[int] = None,
        last_stderr: str = "",
        **kwargs,
    ):
        self.attempts = attempts
        self.last_returncode = last_returncode
        self.last_stderr = last_stderr
        message = (
            f"Container launch '{operation}' failed after {attempts} attempts"
            f" (exit status {last_returncode}): {last_stderr.strip()}"
        )
        super().__init__(
            operation,
            message=message,
            error_type=ErrorType.LAUNCH_RETRY_EXHAUSTED,
            **kwargs,
        )
