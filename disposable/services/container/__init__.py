"""Container management services.

This package provides disposable container functionality split into:
- ports.py: Port normalization and host port resolution
- protocol.py: RuntimeClient protocol
- client.py: Docker SDK client and client factory
- cli.py: Docker command-line client with launch retries
- builder.py: Declarative container builder
- handle.py: Handle owning a running container
- utils.py: Shared utilities for container operations
"""

from .builder import ContainerBuilder
from .cli import DockerCliClient
from .client import DockerApiClient, DockerClientFactory
from .handle import ContainerHandle
from .ports import (
    bind_host_ip,
    canonicalize_port,
    normalize_host_ip,
    resolve_host_port,
)
from .protocol import RuntimeClient
from .utils import run_in_executor, short_id

__all__ = [
    "ContainerBuilder",
    "ContainerHandle",
    "DockerApiClient",
    "DockerCliClient",
    "DockerClientFactory",
    "RuntimeClient",
    "bind_host_ip",
    "canonicalize_port",
    "normalize_host_ip",
    "resolve_host_port",
    "run_in_executor",
    "short_id",
]
