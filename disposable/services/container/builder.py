"""Declarative builder for disposable containers.

Usage:
    builder = (
        ContainerBuilder("mongo")
        .bind_port_as_default("0", "27017")
        .name("test-db")
    )
    async with builder.disposable() as handle:
        handle.url()  # "mongodb://localhost:49153/"

Every builder method returns a new builder; earlier builders are never
modified, so a partially configured builder can be shared between tests.
"""

import warnings
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

import structlog

from ...config import settings, get_image_protocol
from ...models.container import ContainerSpec, PortBinding
from ...models.errors import RuntimeCallError, SpecError
from .client import DockerClientFactory
from .handle import ContainerHandle
from .ports import canonicalize_port, resolve_host_port
from .protocol import RuntimeClient
from .utils import short_id

logger = structlog.get_logger(__name__)

PortLike = Union[str, int]


def _validate_port_number(value: str, field: str) -> None:
    if not value.isdigit() or int(value) > 65535:
        raise SpecError(f"Invalid port number: {value!r}", field=field)


class ContainerBuilder:
    """Accumulates the description of a container to launch.

    Args:
        image: Image reference, e.g. "mongo" or "redis:7"
        host_ip: Host interface for port bindings and URLs; defaults to
            settings.container_host_ip
    """

    def __init__(self, image: str, host_ip: Optional[str] = None):
        if not image or not image.strip():
            raise SpecError("Image reference must not be empty", field="image")
        self._spec = ContainerSpec(image=image, protocol=get_image_protocol(image))
        self._host_ip = host_ip or settings.container_host_ip

    @classmethod
    def _from_spec(cls, spec: ContainerSpec, host_ip: str) -> "ContainerBuilder":
        builder = cls.__new__(cls)
        builder._spec = spec
        builder._host_ip = host_ip
        return builder

    def _replace(self, **changes) -> "ContainerBuilder":
        return self._from_spec(self._spec.model_copy(update=changes), self._host_ip)

    @property
    def spec(self) -> ContainerSpec:
        """The immutable container description built so far."""
        return self._spec

    @property
    def host_ip(self) -> str:
        """Host interface bindings are requested on."""
        return self._host_ip

    def bind_port(
        self, host_port: Optional[PortLike], container_port: PortLike
    ) -> "ContainerBuilder":
        """Publish a container port on the host.

        Args:
            host_port: Host port; None reuses the container port number,
                "0" lets the runtime pick a free port
            container_port: Container port, optionally with "/proto"

        Returns:
            A new builder with the binding appended
        """
        port = canonicalize_port(str(container_port))
        port_number = port.split("/", 1)[0]
        _validate_port_number(port_number, "container_port")

        host_port = port_number if host_port is None else str(host_port)
        _validate_port_number(host_port, "host_port")

        binding = PortBinding(
            container_port=port, host_ip=self._host_ip, host_port=host_port
        )
        port_bindings = dict(self._spec.port_bindings)
        port_bindings[port] = port_bindings.get(port, ()) + (binding,)
        return self._replace(port_bindings=port_bindings)

    def bind_port_as_default(
        self, host_port: Optional[PortLike], container_port: PortLike
    ) -> "ContainerBuilder":
        """Publish a container port and use it for ``ContainerHandle.url()``."""
        port = canonicalize_port(str(container_port))
        return self._replace(default_port=port).bind_port(host_port, port)

    def port_mapping(self, host_port: int, port: Optional[int] = None) -> "ContainerBuilder":
        """Publish ``port`` (default: ``host_port``) on ``host_port``.

        .. deprecated:: use ``bind_port`` instead.
        """
        warnings.warn(
            "port_mapping() is deprecated, use bind_port()",
            DeprecationWarning,
            stacklevel=2,
        )
        container_port = host_port if port is None else port
        return self.bind_port(str(host_port), str(container_port))

    def bind_volume(self, spec: str) -> "ContainerBuilder":
        """Add a raw bind-mount spec such as "/host/dir:/data:ro"."""
        return self._replace(volumes=self._spec.volumes + (spec,))

    def name(self, value: str) -> "ContainerBuilder":
        """Set an explicit container name."""
        if not value:
            raise SpecError("Container name must not be empty", field="name")
        return self._replace(name=value)

    def protocol(self, value: str) -> "ContainerBuilder":
        """Override the access protocol inferred from the image."""
        if not value:
            raise SpecError("Protocol must not be empty", field="protocol")
        return self._replace(protocol=value)

    async def build_disposable(
        self, client: Optional[RuntimeClient] = None
    ) -> ContainerHandle:
        """Create, start and inspect the container.

        The caller owns the returned handle and must release it, either
        with ``async with handle`` or by awaiting ``handle.stop()``.
        ``disposable()`` does both steps in one scope.

        Args:
            client: Runtime client; defaults to the configured backend

        Returns:
            ContainerHandle for the running container

        Raises:
            RuntimeCallError: If any daemon call fails. No handle is
                returned. A failure after start leaves the container
                running; its id is on the exception.
        """
        client = client or DockerClientFactory.create_runtime_client()
        spec = self._spec

        container_id = await client.create_container(spec)
        await client.start_container(container_id)

        try:
            inspection = await client.inspect_container(container_id)
        except RuntimeCallError as e:
            e.container_id = e.container_id or container_id
            logger.error(
                "Container started but could not be inspected; it is still running",
                container_id=short_id(container_id),
                error=str(e),
            )
            raise

        default_host_port = None
        if spec.default_port is not None:
            default_host_port = resolve_host_port(
                inspection, self._host_ip, spec.default_port
            )
            if default_host_port is None:
                logger.warning(
                    "Default port is not bound on the host interface",
                    container_id=short_id(container_id),
                    port=spec.default_port,
                    host_ip=self._host_ip,
                )

        name = spec.name or inspection.container_name or None

        logger.info(
            "Started disposable container",
            container_id=short_id(container_id),
            image=spec.image,
            name=name,
            default_host_port=default_host_port,
        )

        return ContainerHandle(
            container_id=container_id,
            client=client,
            host_ip=self._host_ip,
            name=name,
            default_port=spec.default_port,
            default_host_port=default_host_port,
            protocol=spec.protocol,
        )

    @asynccontextmanager
    async def disposable(
        self, client: Optional[RuntimeClient] = None
    ) -> AsyncIterator[ContainerHandle]:
        """Build the container for the duration of an ``async with`` block.

        The container is stopped on every exit path from the block.
        """
        handle = await self.build_disposable(client)
        try:
            yield handle
        finally:
            await handle.stop()

    def __repr__(self) -> str:
        return f"ContainerBuilder(image={self._spec.image!r}, host_ip={self._host_ip!r})"
