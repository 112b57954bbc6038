"""Disposable containers and fixture data for integration tests."""

from .models.errors import (
    DisposableException,
    LaunchRetryExhausted,
    RuntimeCallError,
    SpecError,
)
from .services.container import (
    ContainerBuilder,
    ContainerHandle,
    DockerApiClient,
    DockerCliClient,
    DockerClientFactory,
    RuntimeClient,
    canonicalize_port,
    resolve_host_port,
)
from .services.fs import ContentKind, TempFile, TempFileFaker, generate_content

__version__ = "0.2.0"

__all__ = [
    "ContainerBuilder",
    "ContainerHandle",
    "DockerApiClient",
    "DockerCliClient",
    "DockerClientFactory",
    "RuntimeClient",
    "canonicalize_port",
    "resolve_host_port",
    "ContentKind",
    "TempFile",
    "TempFileFaker",
    "generate_content",
    "DisposableException",
    "LaunchRetryExhausted",
    "RuntimeCallError",
    "SpecError",
]
