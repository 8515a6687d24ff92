"""Object storage for uploaded videos."""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, Protocol
from urllib.parse import urlparse

from eventreel.config import Settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 64  # 64KB chunks


class ObjectStorage(Protocol):
    def put_object(self, bucket: str, key: str, body: BinaryIO, content_type: str | None) -> int:
        """Store an object and return an HTTP-like status code (200 on success)."""
        ...

    def object_url(self, bucket: str, key: str) -> str: ...


class LocalObjectStorage:
    """Bucket/key object store on the local filesystem."""

    def __init__(self, root: str | Path, public_url: str) -> None:
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    def object_url(self, bucket: str, key: str) -> str:
        return f"{self.public_url}/{bucket}/{key}"

    def put_object(self, bucket: str, key: str, body: BinaryIO, content_type: str | None) -> int:
        bucket_dir = self.root / bucket
        bucket_dir.mkdir(parents=True, exist_ok=True)
        target = bucket_dir / key
        try:
            with open(target, "wb") as f:
                shutil.copyfileobj(body, f, CHUNK_SIZE)
        except OSError as e:
            logger.error("Could not store %s/%s: %s", bucket, key, e)
            if target.exists():
                target.unlink()
            return 500
        logger.info("Stored %s/%s (%s)", bucket, key, content_type or "unknown type")
        return 200


def build_storage(settings: Settings) -> ObjectStorage:
    return LocalObjectStorage(settings.STORAGE_DIR, settings.STORAGE_URL)


def storage_mount_path(storage_url: str) -> str:
    """Path under which the app serves STORAGE_DIR, taken from STORAGE_URL.

    A URL without a path (e.g. a bare host) is served from /storage.
    """
    path = urlparse(storage_url).path.rstrip("/")
    return path or "/storage"
