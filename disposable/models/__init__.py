"""Data models for disposable containers."""

from .container import (
    BoundPort,
    ContainerSpec,
    PortBinding,
    RuntimeInspection,
)
from .errors import (
    ErrorType,
    ErrorDetail,
    DisposableException,
    SpecError,
    RuntimeCallError,
    LaunchRetryExhausted,
)

__all__ = [
    # Container models
    "BoundPort",
    "ContainerSpec",
    "PortBinding",
    "RuntimeInspection",
    # Errors
    "ErrorType",
    "ErrorDetail",
    "DisposableException",
    "SpecError",
    "RuntimeCallError",
    "LaunchRetryExhausted",
]
