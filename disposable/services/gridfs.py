"""Fake files uploaded to a MongoDB GridFS bucket.

Needs the ``gridfs`` extra (pymongo). The bucket usually points at a
disposable mongo container:

    client = MongoClient(handle.url())
    bucket = GridFSBucket(client["testdb"])
    stored = GridFSFileFaker(bucket, length=range(20, 40)).create()
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from bson import ObjectId
from faker import Faker
from gridfs import GridFSBucket

from .fs import ContentKind, LengthLike, generate_content, pick_length

logger = structlog.get_logger(__name__)


@dataclass
class GridFSFile:
    """A file stored in GridFS and, optionally, what was uploaded."""

    id: ObjectId
    filename: str
    content: Optional[bytes] = None


class GridFSFileFaker:
    """Uploads files filled with fake content to a GridFS bucket.

    Every file created by one faker shares its filename; GridFS keeps
    them apart by id.

    Args:
        bucket: Bucket to upload into
        name: Stored filename; a fake file name if None
        length: Content length, or a range to draw it from; defaults to
            0..255
        kind: Kind of content to upload
        include_content: Whether the returned GridFSFile carries the content
        seed: Seed for reproducible names and content
    """

    def __init__(
        self,
        bucket: GridFSBucket,
        name: Optional[str] = None,
        length: Optional[LengthLike] = None,
        kind: ContentKind = ContentKind.TEXT,
        include_content: bool = False,
        seed: Optional[int] = None,
    ):
        self.bucket = bucket
        self.faker = Faker()
        if seed is not None:
            self.faker.seed_instance(seed)
        self.name = name or self.faker.file_name()
        self.length = length
        self.kind = kind
        self.include_content = include_content

    def create(self) -> GridFSFile:
        """Upload a new fake file.

        Blocks on the upload; run it in an executor from async code.
        """
        length = pick_length(self.length, self.faker)
        content = generate_content(self.kind, length, self.faker)

        file_id = self.bucket.upload_from_stream(self.name, content)

        logger.debug(
            "Uploaded GridFS file",
            file_id=str(file_id),
            filename=self.name,
            size=len(content),
        )
        return GridFSFile(
            id=file_id,
            filename=self.name,
            content=content if self.include_content else None,
        )
