"""Docker SDK runtime client and client factory.

DockerApiClient talks to the daemon through the docker SDK's low-level
API. The SDK is blocking, so every call runs in the default executor.
"""

import threading
from typing import Any, Dict, List, Optional

import docker
import structlog
from docker.errors import DockerException, ImageNotFound, NotFound

from ...config import settings
from ...models.container import ContainerSpec, RuntimeInspection
from ...models.errors import RuntimeCallError
from .ports import bind_host_ip
from .protocol import RuntimeClient
from .utils import run_in_executor, short_id

logger = structlog.get_logger(__name__)

# Transport failures from requests subclass OSError
_CALL_ERRORS = (DockerException, OSError)


class DockerClientFactory:
    """Creates runtime clients and caches one docker SDK client per process.

    The SDK client is safe to share between concurrent builds; each
    handle only ever issues calls scoped to its own container.
    """

    _docker_client: Optional[docker.DockerClient] = None
    _lock = threading.Lock()

    @classmethod
    def get_docker_client(cls) -> docker.DockerClient:
        """Get the shared docker SDK client, creating it on first use.

        Raises:
            RuntimeCallError: If the daemon cannot be reached.
        """
        with cls._lock:
            if cls._docker_client is None:
                try:
                    if settings.docker_base_url:
                        cls._docker_client = docker.DockerClient(
                            base_url=settings.docker_base_url,
                            timeout=settings.runtime_call_timeout,
                        )
                    else:
                        cls._docker_client = docker.from_env(
                            timeout=settings.runtime_call_timeout
                        )
                except _CALL_ERRORS as e:
                    logger.error("Failed to connect to Docker daemon", error=str(e))
                    raise RuntimeCallError(
                        "connect", message=f"Cannot connect to Docker daemon: {e}"
                    ) from e
                logger.info(
                    "Docker client initialized",
                    base_url=settings.docker_base_url or "from_env",
                )
            return cls._docker_client

    @classmethod
    def create_runtime_client(cls, backend: Optional[str] = None) -> RuntimeClient:
        """Build the runtime client for the configured launch path.

        Args:
            backend: "api" or "cli"; defaults to settings.runtime_backend

        Returns:
            A RuntimeClient implementation
        """
        backend = (backend or settings.runtime_backend).lower()
        if backend == "cli":
            from .cli import DockerCliClient

            return DockerCliClient()
        if backend == "api":
            return DockerApiClient()
        raise ValueError(f"Unknown runtime backend: {backend}")

    @classmethod
    def reset(cls) -> None:
        """Close and forget the shared SDK client."""
        with cls._lock:
            if cls._docker_client is not None:
                try:
                    cls._docker_client.close()
                except _CALL_ERRORS as e:
                    logger.warning("Failed to close Docker client", error=str(e))
            cls._docker_client = None


def _port_bindings(spec: ContainerSpec) -> Dict[str, List[Dict[str, str]]]:
    """Convert ContainerSpec bindings to the SDK's HostConfig.PortBindings form."""
    return {
        container_port: [
            {
                "HostIp": bind_host_ip(binding.host_ip),
                "HostPort": binding.host_port,
            }
            for binding in bindings
        ]
        for container_port, bindings in spec.port_bindings.items()
    }


class DockerApiClient:
    """RuntimeClient over the docker SDK.

    Args:
        docker_client: SDK client to use. If None, the factory's shared
            client is created on first call.
    """

    def __init__(self, docker_client: Optional[docker.DockerClient] = None):
        self._docker = docker_client

    async def _client(self) -> docker.DockerClient:
        if self._docker is None:
            self._docker = await run_in_executor(DockerClientFactory.get_docker_client)
        return self._docker

    async def _create(self, client: docker.DockerClient, spec: ContainerSpec) -> Any:
        host_config = client.api.create_host_config(
            port_bindings=_port_bindings(spec) or None,
            binds=list(spec.volumes) or None,
            auto_remove=spec.auto_remove,
        )
        return await run_in_executor(
            client.api.create_container,
            spec.image,
            name=spec.name,
            ports=list(spec.exposed_ports()) or None,
            host_config=host_config,
            detach=True,
        )

    async def create_container(self, spec: ContainerSpec) -> str:
        """Create a container, pulling the image first if it is missing."""
        client = await self._client()
        try:
            try:
                response = await self._create(client, spec)
            except ImageNotFound:
                logger.info("Image not present locally, pulling", image=spec.image)
                await run_in_executor(client.images.pull, spec.image)
                response = await self._create(client, spec)
        except _CALL_ERRORS as e:
            logger.error("Failed to create container", image=spec.image, error=str(e))
            raise RuntimeCallError(
                "create", message=f"Failed to create container from {spec.image}: {e}"
            ) from e

        container_id = response["Id"]
        for warning in response.get("Warnings") or []:
            logger.warning(
                "Docker create warning",
                container_id=short_id(container_id),
                warning=warning,
            )
        logger.debug(
            "Created container",
            container_id=short_id(container_id),
            image=spec.image,
            name=spec.name,
        )
        return container_id

    async def start_container(self, container_id: str) -> None:
        """Start a created container."""
        client = await self._client()
        try:
            await run_in_executor(client.api.start, container_id)
        except _CALL_ERRORS as e:
            logger.error(
                "Failed to start container",
                container_id=short_id(container_id),
                error=str(e),
            )
            raise RuntimeCallError(
                "start", message=f"Failed to start container: {e}", container_id=container_id
            ) from e

    async def inspect_container(self, container_id: str) -> RuntimeInspection:
        """Inspect a container."""
        client = await self._client()
        try:
            attrs = await run_in_executor(client.api.inspect_container, container_id)
        except _CALL_ERRORS as e:
            raise RuntimeCallError(
                "inspect",
                message=f"Failed to inspect container: {e}",
                container_id=container_id,
            ) from e
        return RuntimeInspection.from_attrs(attrs)

    async def stop_container(self, container_id: str) -> None:
        """Stop a container; auto-remove takes care of deleting it."""
        client = await self._client()
        try:
            await run_in_executor(client.api.stop, container_id)
        except NotFound:
            logger.debug("Container already gone", container_id=short_id(container_id))
        except _CALL_ERRORS as e:
            raise RuntimeCallError(
                "stop", message=f"Failed to stop container: {e}", container_id=container_id
            ) from e

    async def ping(self) -> bool:
        """Check whether the daemon answers."""
        try:
            client = await self._client()
            return bool(await run_in_executor(client.ping))
        except (RuntimeCallError,) + _CALL_ERRORS as e:
            logger.debug("Docker daemon not reachable", error=str(e))
            return False
