"""Port string normalization and host port resolution."""

from typing import Optional

from ...models.container import RuntimeInspection

DEFAULT_PROTOCOL = "tcp"
WILDCARD_HOST_IP = "0.0.0.0"

# The runtime reports loopback bindings against the wildcard interface
LOOPBACK_ALIASES = frozenset({"localhost", "127.0.0.1"})


def canonicalize_port(port: str) -> str:
    """Append the default protocol suffix unless one is already present.

    Idempotent: ``canonicalize_port(canonicalize_port(p)) == canonicalize_port(p)``.
    """
    port = str(port)
    if "/" in port:
        return port
    return f"{port}/{DEFAULT_PROTOCOL}"


def normalize_host_ip(host_ip: str) -> str:
    """Map loopback aliases to the interface the runtime actually reports."""
    if host_ip in LOOPBACK_ALIASES:
        return WILDCARD_HOST_IP
    return host_ip


def bind_host_ip(host_ip: str) -> str:
    """Interface to send to the daemon for a requested binding.

    Loopback aliases are sent as the empty (wildcard) interface, which the
    daemon reports as 0.0.0.0, the interface ``resolve_host_port`` looks
    them up on.
    """
    if host_ip in LOOPBACK_ALIASES:
        return ""
    return host_ip


def resolve_host_port(
    inspection: RuntimeInspection, host_ip: str, container_port: str
) -> Optional[str]:
    """Find the host port a container port is bound to on a given interface.

    Only a binding whose reported interface equals the normalized
    ``host_ip`` counts; bindings on other interfaces are ignored.

    Args:
        inspection: Snapshot of the started container
        host_ip: Interface the caller will connect through
        container_port: Container port, with or without protocol suffix

    Returns:
        The bound host port, or None if the port is not bound on that interface
    """
    port = canonicalize_port(container_port)
    wanted_ip = normalize_host_ip(host_ip)

    bindings = inspection.ports.get(port)
    if not bindings:
        return None

    for binding in bindings:
        if binding.host_ip == wanted_ip:
            return binding.host_port
    return None
