"""Docker command-line runtime client.

Launches containers by invoking the docker binary instead of the
structured API. Launch commands are retried with a randomized backoff;
host ports are discovered afterwards with a separate ``docker inspect``.
"""

import asyncio
import json
import random
from typing import List, Optional, Tuple

import structlog

from ...config import settings
from ...models.container import ContainerSpec, PortBinding, RuntimeInspection
from ...models.errors import LaunchRetryExhausted, RuntimeCallError
from .ports import bind_host_ip
from .utils import short_id

logger = structlog.get_logger(__name__)


def publish_arg(binding: PortBinding) -> str:
    """Format a binding as a ``-p`` value: ``[ip:]host_port:container_port``."""
    host_ip = bind_host_ip(binding.host_ip)
    if ":" in host_ip:
        host_ip = f"[{host_ip}]"
    if host_ip:
        return f"{host_ip}:{binding.host_port}:{binding.container_port}"
    return f"{binding.host_port}:{binding.container_port}"


def build_create_args(spec: ContainerSpec) -> List[str]:
    """Build ``docker create`` arguments (not including the binary)."""
    args = ["create"]
    if spec.auto_remove:
        args.append("--rm")
    if spec.name:
        args.extend(["--name", spec.name])

    for bindings in spec.port_bindings.values():
        for binding in bindings:
            args.extend(["-p", publish_arg(binding)])

    for volume in spec.volumes:
        args.extend(["-v", volume])

    args.append(spec.image)
    return args


class DockerCliClient:
    """RuntimeClient over the docker command-line binary.

    Args:
        binary: docker executable; defaults to settings.docker_binary
        max_attempts: Launch retry budget; defaults to settings.launch_max_attempts
        backoff_bounds: (min, max) backoff in seconds; defaults to the
            launch settings
        rng: Random source for the backoff
    """

    def __init__(
        self,
        binary: Optional[str] = None,
        max_attempts: Optional[int] = None,
        backoff_bounds: Optional[Tuple[float, float]] = None,
        rng: Optional[random.Random] = None,
    ):
        launch = settings.launch
        self._binary = binary or settings.docker_binary
        self._max_attempts = max_attempts or launch.launch_max_attempts
        self._backoff_bounds = backoff_bounds or launch.backoff_bounds_seconds()
        self._rng = rng or random.Random()

    @property
    def max_attempts(self) -> int:
        """Total attempts allowed for a launch command."""
        return self._max_attempts

    async def _run(self, args: List[str]) -> Tuple[int, str, str]:
        """Run the docker binary and collect its output.

        Returns:
            Tuple of (exit_code, stdout, stderr)
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self._binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RuntimeCallError(
                args[0], message=f"Cannot run {self._binary}: {e}"
            ) from e

        try:
            stdout_bytes, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            # Never leave a docker child running past the call
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
            logger.warning("Docker command cancelled, killed child", command=args[0])
            raise

        stdout = stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else ""
        stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""
        return proc.returncode, stdout, stderr

    async def _run_with_retry(
        self, operation: str, args: List[str], container_id: Optional[str] = None
    ) -> str:
        """Run a launch command, retrying non-zero exits with a random backoff.

        Returns:
            stdout of the successful attempt

        Raises:
            LaunchRetryExhausted: If every attempt exited non-zero.
        """
        returncode, stderr = None, ""
        for attempt in range(1, self._max_attempts + 1):
            returncode, stdout, stderr = await self._run(args)
            if returncode == 0:
                if attempt > 1:
                    logger.info(
                        "Launch succeeded after retry",
                        operation=operation,
                        attempt=attempt,
                    )
                return stdout

            logger.warning(
                "Launch attempt failed",
                operation=operation,
                attempt=attempt,
                max_attempts=self._max_attempts,
                returncode=returncode,
                stderr=stderr.strip()[:500],
            )
            if attempt < self._max_attempts:
                await asyncio.sleep(self._rng.uniform(*self._backoff_bounds))

        raise LaunchRetryExhausted(
            operation,
            attempts=self._max_attempts,
            last_returncode=returncode,
            last_stderr=stderr,
            container_id=container_id,
        )

    async def create_container(self, spec: ContainerSpec) -> str:
        """Create a container with ``docker create``."""
        stdout = await self._run_with_retry("create", build_create_args(spec))
        lines = stdout.strip().splitlines()
        if not lines:
            raise RuntimeCallError(
                "create", message="docker create did not print a container ID"
            )
        container_id = lines[-1].strip()
        logger.debug(
            "Created container",
            container_id=short_id(container_id),
            image=spec.image,
            name=spec.name,
        )
        return container_id

    async def start_container(self, container_id: str) -> None:
        """Start a container with ``docker start``."""
        await self._run_with_retry("start", ["start", container_id], container_id)

    async def inspect_container(self, container_id: str) -> RuntimeInspection:
        """Query the container's state with ``docker inspect``."""
        returncode, stdout, stderr = await self._run(
            ["inspect", "--type", "container", container_id]
        )
        if returncode != 0:
            raise RuntimeCallError(
                "inspect",
                message=f"Failed to inspect container: {stderr.strip()}",
                container_id=container_id,
            )
        try:
            documents = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise RuntimeCallError(
                "inspect",
                message=f"Unreadable docker inspect output: {e}",
                container_id=container_id,
            ) from e
        if not documents:
            raise RuntimeCallError(
                "inspect", message="docker inspect returned nothing", container_id=container_id
            )
        return RuntimeInspection.from_attrs(documents[0])

    async def stop_container(self, container_id: str) -> None:
        """Stop a container with ``docker stop``."""
        returncode, _, stderr = await self._run(["stop", container_id])
        if returncode == 0:
            return
        if "no such container" in stderr.lower():
            logger.debug("Container already gone", container_id=short_id(container_id))
            return
        raise RuntimeCallError(
            "stop",
            message=f"Failed to stop container: {stderr.strip()}",
            container_id=container_id,
        )

    async def ping(self) -> bool:
        """Check whether the CLI can reach the daemon."""
        try:
            returncode, _, _ = await self._run(["version", "--format", "{{.Server.Version}}"])
        except RuntimeCallError as e:
            logger.debug("Docker CLI not usable", error=str(e))
            return False
        return returncode == 0
