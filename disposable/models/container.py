"""Container-related data models.

ContainerSpec is what the builder produces; RuntimeInspection is the
daemon's view of a container after it has been started.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class PortBinding(BaseModel):
    """A requested publication of a container port on the host.

    ``host_port`` of ``"0"`` asks the runtime to pick any free port.
    """

    model_config = ConfigDict(frozen=True)

    container_port: str = Field(description="Canonical container port, e.g. '27017/tcp'")
    host_ip: str = Field(description="Host interface to bind against")
    host_port: str = Field(description="Host port, or '0' for runtime-assigned")


class ContainerSpec(BaseModel):
    """Declarative description of a container to create.

    Every key in ``port_bindings`` is already canonical ("N/proto").
    """

    model_config = ConfigDict(frozen=True)

    image: str = Field(description="Image reference")
    name: Optional[str] = Field(default=None, description="Explicit container name")
    port_bindings: Dict[str, Tuple[PortBinding, ...]] = Field(
        default_factory=dict, description="Container port -> bindings, insertion ordered"
    )
    volumes: Tuple[str, ...] = Field(
        default=(), description="Raw bind-mount specs, e.g. '/src:/dst:ro'"
    )
    default_port: Optional[str] = Field(
        default=None, description="Container port used to build the default URL"
    )
    protocol: Optional[str] = Field(default=None, description="Access protocol (URL scheme)")
    auto_remove: bool = Field(default=True, description="Remove the container once stopped")

    def exposed_ports(self) -> Tuple[Tuple[str, str], ...]:
        """Get (port, protocol) pairs for every bound container port."""
        return tuple(
            tuple(container_port.split("/", 1)) for container_port in self.port_bindings
        )


class BoundPort(BaseModel):
    """A host address the runtime actually bound a container port to."""

    model_config = ConfigDict(frozen=True)

    host_ip: str = Field(default="", description="Interface reported by the runtime")
    host_port: str = Field(default="", description="Port reported by the runtime")


class RuntimeInspection(BaseModel):
    """Read-only snapshot of a started container.

    This is the only place the real host port of an auto-assigned
    binding can be learned.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Container identifier")
    name: str = Field(default="", description="Name as reported by the runtime")
    running: bool = Field(default=False, description="Whether the container is running")
    ports: Dict[str, Optional[Tuple[BoundPort, ...]]] = Field(
        default_factory=dict,
        description="Container port -> bound host addresses (None if exposed but unbound)",
    )

    @property
    def container_name(self) -> str:
        """Name without the leading '/' the runtime prepends."""
        if self.name.startswith("/"):
            return self.name[1:]
        return self.name

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "RuntimeInspection":
        """Build a snapshot from the daemon's inspect JSON.

        Both the SDK (``container.attrs``) and ``docker inspect`` return
        this document.
        """
        network_settings = attrs.get("NetworkSettings") or {}
        ports: Dict[str, Optional[Tuple[BoundPort, ...]]] = {}
        for container_port, bindings in (network_settings.get("Ports") or {}).items():
            if bindings is None:
                ports[container_port] = None
                continue
            ports[container_port] = tuple(
                BoundPort(
                    host_ip=binding.get("HostIp") or "",
                    host_port=binding.get("HostPort") or "",
                )
                for binding in bindings
            )

        state = attrs.get("State") or {}
        return cls(
            id=attrs.get("Id", ""),
            name=attrs.get("Name") or "",
            running=bool(state.get("Running", False)),
            ports=ports,
        )


__all__ = [
    "BoundPort",
    "ContainerSpec",
    "PortBinding",
    "RuntimeInspection",
]
