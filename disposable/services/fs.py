"""Fake file content and self-deleting temporary files for fixtures.

These helpers produce payloads for tests that need data to push into a
disposable container; the container lifecycle code never uses them.
"""

import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog
from faker import Faker

logger = structlog.get_logger(__name__)

# Length range used when the caller does not pick one
DEFAULT_MAX_LENGTH = 255

LengthLike = Union[int, range]


class ContentKind(str, Enum):
    """Kind of fake content to generate."""

    TEXT = "text"


def generate_content(
    kind: ContentKind, length: int, faker: Optional[Faker] = None
) -> bytes:
    """Generate fake content.

    Args:
        kind: Kind of content
        length: Size in kind-specific units (words for TEXT)
        faker: Faker instance to draw from; a fresh one if None

    Returns:
        The encoded content
    """
    if length < 0:
        raise ValueError(f"length must not be negative: {length}")
    faker = faker or Faker()
    if kind == ContentKind.TEXT:
        return " ".join(faker.words(nb=length)).encode("utf-8")
    raise ValueError(f"Unsupported content kind: {kind}")


def pick_length(length: Optional[LengthLike], faker: Faker) -> int:
    """Resolve a length setting to a concrete size.

    None draws from 0..DEFAULT_MAX_LENGTH, a range draws one of its values
    and an int is used as is.
    """
    if length is None:
        return faker.random_int(min=0, max=DEFAULT_MAX_LENGTH)
    if isinstance(length, range):
        if not length:
            raise ValueError(f"Empty length range: {length}")
        return faker.random.choice(length)
    return length


@dataclass
class TempFile:
    """A temporary file on disk and, optionally, what was written to it.

    The file is deleted when the object is used as a context manager and
    the block exits, or when ``remove()`` is called.
    """

    path: Path
    content: Optional[bytes] = None

    def remove(self) -> None:
        """Delete the file if it still exists."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def __enter__(self) -> "TempFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.remove()


class TempFileFaker:
    """Creates temporary files filled with fake content.

    Args:
        length: Content length, or a range to draw it from; defaults to
            0..255
        kind: Kind of content to write
        include_content: Whether the returned TempFile carries the content
        seed: Seed for reproducible content
    """

    def __init__(
        self,
        length: Optional[LengthLike] = None,
        kind: ContentKind = ContentKind.TEXT,
        include_content: bool = True,
        seed: Optional[int] = None,
    ):
        self.length = length
        self.kind = kind
        self.include_content = include_content
        self.faker = Faker()
        if seed is not None:
            self.faker.seed_instance(seed)

    def create(self) -> TempFile:
        """Write a new temporary file.

        The caller owns the file; prefer ``temp_file()`` so it is removed.
        """
        length = pick_length(self.length, self.faker)
        content = generate_content(self.kind, length, self.faker)

        fd, name = tempfile.mkstemp(prefix="disposable-", suffix=".txt")
        with os.fdopen(fd, "wb") as f:
            f.write(content)

        logger.debug("Created temp file", path=name, size=len(content))
        return TempFile(
            path=Path(name),
            content=content if self.include_content else None,
        )

    @contextmanager
    def temp_file(self) -> Iterator[TempFile]:
        """Yield a temporary file that is deleted when the block exits."""
        temp = self.create()
        try:
            yield temp
        finally:
            temp.remove()
