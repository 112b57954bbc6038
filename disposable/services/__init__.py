"""Services for disposable test resources."""

from .container import ContainerBuilder, ContainerHandle, DockerClientFactory
from .fs import ContentKind, TempFile, TempFileFaker, generate_content

__all__ = [
    "ContainerBuilder",
    "ContainerHandle",
    "DockerClientFactory",
    "ContentKind",
    "TempFile",
    "TempFileFaker",
    "generate_content",
]
