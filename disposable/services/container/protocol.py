"""Container runtime client protocol definition.

Defines the interface the builder and handle use to talk to a container
daemon. It is implemented over the docker SDK (DockerApiClient) and over
the docker command-line binary (DockerCliClient).
"""

from typing import Protocol

from ...models.container import ContainerSpec, RuntimeInspection


class RuntimeClient(Protocol):
    """Protocol for container runtime clients.

    Every operation raises RuntimeCallError when the daemon (or the
    transport to it) fails.
    """

    async def create_container(self, spec: ContainerSpec) -> str:
        """Create (but do not start) a container.

        Args:
            spec: Container to create.

        Returns:
            The identifier assigned by the daemon.
        """
        ...

    async def start_container(self, container_id: str) -> None:
        """Start a created container.

        Args:
            container_id: Container to start.
        """
        ...

    async def inspect_container(self, container_id: str) -> RuntimeInspection:
        """Get a fresh snapshot of a container.

        Args:
            container_id: Container to inspect.

        Returns:
            RuntimeInspection with the bound host ports.
        """
        ...

    async def stop_container(self, container_id: str) -> None:
        """Stop a container. A container that no longer exists is not an error.

        Args:
            container_id: Container to stop.
        """
        ...

    async def ping(self) -> bool:
        """Check whether the daemon is reachable.

        Returns:
            True if the daemon answered, False otherwise.
        """
        ...


__all__ = ["RuntimeClient"]
