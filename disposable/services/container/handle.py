"""Handle for a running disposable container.

A ContainerHandle owns exactly one container. Releasing it (``stop()``,
leaving ``async with handle``, or leaving ``builder.disposable()``)
issues one stop request; the container was created with auto-remove,
so stopping it also deletes it.
"""

import warnings
from typing import Optional

import structlog

from ...models.errors import SpecError
from .ports import resolve_host_port
from .protocol import RuntimeClient
from .utils import short_id

logger = structlog.get_logger(__name__)


class ContainerHandle:
    """A started container and the information needed to reach it.

    All fields are fixed at construction. Use the handle as an async
    context manager or call ``stop()`` in a ``finally`` block; a handle
    that is garbage collected while still owning a container emits a
    ResourceWarning.
    """

    def __init__(
        self,
        container_id: str,
        client: RuntimeClient,
        host_ip: str,
        name: Optional[str] = None,
        default_port: Optional[str] = None,
        default_host_port: Optional[str] = None,
        protocol: Optional[str] = None,
    ):
        self._container_id = container_id
        self._client = client
        self._host_ip = host_ip
        self._name = name
        self._default_port = default_port
        self._default_host_port = default_host_port
        self._protocol = protocol
        self._stopped = False

    @property
    def container_id(self) -> str:
        """Identifier assigned by the daemon."""
        return self._container_id

    @property
    def name(self) -> Optional[str]:
        """Container name, explicit or runtime-assigned."""
        return self._name

    @property
    def host_ip(self) -> str:
        """Host interface used to build URLs."""
        return self._host_ip

    @property
    def default_port(self) -> Optional[str]:
        """Container port declared as the default access port."""
        return self._default_port

    @property
    def default_host_port(self) -> Optional[str]:
        """Host port the default container port is bound to."""
        return self._default_host_port

    @property
    def protocol(self) -> Optional[str]:
        """Access protocol used as the URL scheme."""
        return self._protocol

    @property
    def client(self) -> RuntimeClient:
        """Runtime client that created this container."""
        return self._client

    @property
    def stopped(self) -> bool:
        """Whether the stop request has already been issued."""
        return self._stopped

    def _require_protocol(self) -> str:
        if not self._protocol:
            raise SpecError(
                "No access protocol for this container; set one with "
                "ContainerBuilder.protocol() or use a well-known image",
                field="protocol",
            )
        return self._protocol

    def _format_url(self, protocol: str, host_port: Optional[str]) -> str:
        if host_port is None:
            return f"{protocol}://{self._host_ip}/"
        return f"{protocol}://{self._host_ip}:{host_port}/"

    def url(self) -> str:
        """URL of the default access port.

        Returns:
            ``{protocol}://{host}:{port}/``, or ``{protocol}://{host}/``
            when no default port was declared

        Raises:
            SpecError: If there is no protocol, or the declared default
                port is not bound on the handle's host interface.
        """
        protocol = self._require_protocol()
        if self._default_port is not None and self._default_host_port is None:
            raise SpecError(
                f"Default port {self._default_port} is not bound on {self._host_ip}",
                field="default_port",
            )
        return self._format_url(protocol, self._default_host_port)

    async def url_by_port(self, port: str) -> Optional[str]:
        """URL of an arbitrary container port.

        Inspects the container again on every call; bound ports are
        never cached.

        Args:
            port: Container port, with or without protocol suffix

        Returns:
            The URL, or None if the port is not bound on the host interface

        Raises:
            SpecError: If there is no protocol.
            RuntimeCallError: If the inspection fails.
        """
        protocol = self._require_protocol()
        inspection = await self._client.inspect_container(self._container_id)
        host_port = resolve_host_port(inspection, self._host_ip, port)
        if host_port is None:
            return None
        return self._format_url(protocol, host_port)

    async def stop(self) -> None:
        """Stop the container.

        Only the first call reaches the daemon. A failing stop is logged
        and not raised, since teardown has no caller to report to.
        """
        if self._stopped:
            return
        self._stopped = True

        try:
            await self._client.stop_container(self._container_id)
            logger.info(
                "Stopped container",
                container_id=short_id(self._container_id),
                name=self._name,
            )
        except Exception as e:
            logger.warning(
                "Failed to stop container",
                container_id=short_id(self._container_id),
                name=self._name,
                error=str(e),
            )

    async def __aenter__(self) -> "ContainerHandle":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def __del__(self):
        if not getattr(self, "_stopped", True):
            warnings.warn(
                f"{self!r} was never stopped; use 'async with' or call stop()",
                ResourceWarning,
                stacklevel=2,
            )

    def __repr__(self) -> str:
        return (
            f"ContainerHandle(container_id={short_id(self._container_id)!r}, "
            f"name={self._name!r}, stopped={self._stopped})"
        )
