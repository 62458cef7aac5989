from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from lurm.core.errors import NotFoundOnRemove, RemoteWriteError
from lurm.core.files import ensure_directory, prune_empty_parents, write_bytes_atomic

logger = logging.getLogger(__name__)

PUBLIC_OBJECT_PREFIX = "storage/v1/object/public"


@dataclass(slots=True)
class StoredObject:
    path: str
    public_url: str
    size_bytes: int


class BucketStore:
    """Blob store keeping one bucket as a directory tree under base_dir."""

    def __init__(self, base_dir: Path, bucket: str, public_base_url: str) -> None:
        self.base_dir = base_dir
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self.base_dir / self.bucket

    def ensure_bucket_layout(self) -> None:
        ensure_directory(self.bucket_dir)

    def public_url_for(self, object_path: str) -> str:
        return f"{self.public_base_url}/{PUBLIC_OBJECT_PREFIX}/{quote(self.bucket)}/{quote(object_path)}"

    def object_abspath(self, object_path: str) -> Path:
        relative = PurePosixPath(object_path)
        if not object_path or relative.is_absolute() or ".." in relative.parts:
            raise RemoteWriteError(f"Invalid object path: {object_path!r}")
        return self.bucket_dir.joinpath(*relative.parts)

    def upload_object(self, object_path: str, data: bytes, *, upsert: bool = False) -> StoredObject:
        dst = self.object_abspath(object_path)
        if dst.exists() and not upsert:
            raise RemoteWriteError(f"The resource already exists: {object_path}")
        try:
            self.ensure_bucket_layout()
            write_bytes_atomic(dst, data)
        except OSError as exc:
            raise RemoteWriteError(f"Failed to store {object_path}: {exc.strerror or exc}") from exc
        logger.info("Stored %s (%d bytes) in bucket %s", object_path, len(data), self.bucket)
        return StoredObject(path=object_path, public_url=self.public_url_for(object_path), size_bytes=len(data))

    def remove_object(self, object_path: str) -> None:
        target = self.object_abspath(object_path)
        if not target.is_file():
            raise NotFoundOnRemove(f"Object not found: {object_path}")
        try:
            target.unlink()
        except FileNotFoundError as exc:
            raise NotFoundOnRemove(f"Object not found: {object_path}") from exc
        except OSError as exc:
            raise RemoteWriteError(f"Failed to remove {object_path}: {exc.strerror or exc}") from exc
        prune_empty_parents(target, self.bucket_dir)
        logger.info("Removed %s from bucket %s", object_path, self.bucket)

    def exists(self, object_path: str) -> bool:
        try:
            return self.object_abspath(object_path).is_file()
        except RemoteWriteError:
            return False
