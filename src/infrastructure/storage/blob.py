"""Bucket/object storage interface and its local filesystem implementation.

Objects live under ``<root>/<bucket>/<name>``. The creation time reported for
an object is the file's modification time, which is what the PDF cleanup
compares against. Public URLs point at the ``/files`` route that serves the
stored bytes back.

Bucket and object names are restricted to a safe character set so a name can
never escape its bucket directory.
"""

from __future__ import annotations

import asyncio
import mimetypes
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import lru_cache
from pathlib import Path
from typing import Final, Protocol
from urllib.parse import quote

from loguru import logger

from src.core.config import StorageConfig, get_settings
from src.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.infrastructure.constants import DEFAULT_CONTENT_TYPE, MAX_STORED_NAME_LENGTH

_SAFE_NAME: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Metadata of an object in a bucket."""

    name: str
    size: int
    created_at: datetime


class BlobStorage(Protocol):
    """Operations the service needs from an object store."""

    async def upload(
        self,
        bucket: str,
        name: str,
        data: bytes,
        content_type: str,
        *,
        upsert: bool = False,
    ) -> str:
        """Store ``data`` and return the object's path within the bucket."""
        ...

    async def download(self, bucket: str, name: str) -> bytes: ...

    async def list(self, bucket: str) -> list[StoredObject]: ...

    async def remove(self, bucket: str, names: list[str]) -> list[str]:
        """Delete objects and return the names that were actually removed."""
        ...

    def public_url(self, bucket: str, name: str) -> str: ...


def validate_object_name(name: str) -> str:
    """Reject names that are empty, too long or could traverse directories.

    Raises:
        ValidationError: If the name is not a plain, safe file name.
    """
    if (
        not name
        or len(name) > MAX_STORED_NAME_LENGTH
        or ".." in name
        or not _SAFE_NAME.match(name)
    ):
        raise ValidationError(
            "Invalid object name",
            context={"object_name": name[:MAX_STORED_NAME_LENGTH]},
        )
    return name


def guess_content_type(name: str) -> str:
    return mimetypes.guess_type(name)[0] or DEFAULT_CONTENT_TYPE


class LocalBlobStorage:
    """:class:`BlobStorage` backed by a directory tree.

    Args:
        root: Directory holding one sub-directory per bucket.
        public_base_url: URL prefix under which objects are served.
    """

    def __init__(self, root: Path, public_base_url: str) -> None:
        self.root = root
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, bucket: str, name: str) -> Path:
        return self.root / validate_object_name(bucket) / validate_object_name(name)

    async def upload(
        self,
        bucket: str,
        name: str,
        data: bytes,
        content_type: str,
        *,
        upsert: bool = False,
    ) -> str:
        """Write an object to disk.

        Args:
            bucket: Bucket name.
            name: Object name.
            data: Object contents.
            content_type: MIME type, recorded in the log only.
            upsert: Overwrite an existing object instead of failing.

        Returns:
            str: The object's path within the bucket.

        Raises:
            ConflictError: If the object exists and ``upsert`` is False.
        """
        path = self._path(bucket, name)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            mode = "wb" if upsert else "xb"
            with path.open(mode) as fh:
                fh.write(data)

        try:
            await asyncio.to_thread(write)
        except FileExistsError as e:
            raise ConflictError(
                "Object already exists",
                context={"bucket": bucket, "object_name": name},
                cause=e,
            ) from e

        logger.info(
            "Stored object {}/{}",
            bucket,
            name,
            size=len(data),
            content_type=content_type,
        )
        return name

    async def download(self, bucket: str, name: str) -> bytes:
        """Read an object.

        Raises:
            NotFoundError: If the object does not exist.
        """
        path = self._path(bucket, name)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise NotFoundError(
                "Object not found",
                context={"bucket": bucket, "object_name": name},
                cause=e,
            ) from e

    async def list(self, bucket: str) -> list[StoredObject]:
        """List the objects of a bucket; a missing bucket is empty."""
        directory = self.root / validate_object_name(bucket)

        def scan() -> list[StoredObject]:
            if not directory.is_dir():
                return []
            objects = []
            for entry in sorted(directory.iterdir()):
                if not entry.is_file():
                    continue
                stat = entry.stat()
                objects.append(
                    StoredObject(
                        name=entry.name,
                        size=stat.st_size,
                        created_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                    )
                )
            return objects

        return await asyncio.to_thread(scan)

    async def remove(self, bucket: str, names: list[str]) -> list[str]:
        paths = [(name, self._path(bucket, name)) for name in names]

        def unlink_all() -> list[str]:
            removed = []
            for name, path in paths:
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                removed.append(name)
            return removed

        removed = await asyncio.to_thread(unlink_all)
        logger.info("Removed {} objects from {}", len(removed), bucket)
        return removed

    def public_url(self, bucket: str, name: str) -> str:
        return f"{self.public_base_url}/{quote(bucket)}/{quote(name)}"

    def local_path(self, bucket: str, name: str) -> Path:
        """Filesystem path of an object, for streaming it back."""
        return self._path(bucket, name)


def build_blob_storage(config: StorageConfig) -> LocalBlobStorage:
    return LocalBlobStorage(Path(config.root_path), config.public_base_url)


@lru_cache
def get_blob_storage() -> LocalBlobStorage:
    """Process-wide storage built from the current settings."""
    return build_blob_storage(get_settings().storage_config)
