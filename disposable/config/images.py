"""
Well-known images and the protocol used to reach them.

The builder consults this table to pick a default access protocol
when the caller does not set one explicitly.
"""

from typing import Dict, List, Optional


# Repository name -> URL scheme
IMAGE_PROTOCOLS: Dict[str, str] = {
    "mongo": "mongodb",
    "redis": "redis",
    "postgres": "postgresql",
    "mysql": "mysql",
    "mariadb": "mysql",
    "rabbitmq": "amqp",
    "memcached": "memcached",
    "nats": "nats",
}


def image_repository(image: str) -> str:
    """Strip registry, namespace, tag and digest from an image reference.

    ``docker.io/library/mongo:7@sha256:...`` becomes ``mongo``.
    """
    name = image.split("@", 1)[0]
    name = name.rsplit("/", 1)[-1]
    return name.split(":", 1)[0].lower()


def get_image_protocol(image: str) -> Optional[str]:
    """Get the default access protocol for an image, if it is well known."""
    return IMAGE_PROTOCOLS.get(image_repository(image))


def get_known_images() -> List[str]:
    """Get the repository names with a known protocol."""
    return list(IMAGE_PROTOCOLS.keys())
