from __future__ import annotations

from typing import Protocol
from urllib.parse import unquote, urlparse


class StoragePathResolver(Protocol):
    def resolve_storage_path(self, file_url: str) -> str | None: ...


class BucketSegmentPathResolver:
    """Infer a bucket-relative object path from a public file URL.

    The object path is everything after the first path segment equal to the
    bucket name, e.g. ``.../object/public/resource-files/public/<id>/a.pdf``
    resolves to ``public/<id>/a.pdf``. URLs that were reformatted so the
    bucket segment no longer appears resolve to None.
    """

    def __init__(self, bucket: str) -> None:
        self.bucket = bucket.strip("/")

    def resolve_storage_path(self, file_url: str) -> str | None:
        if not file_url or not self.bucket:
            return None
        segments = [unquote(segment) for segment in urlparse(file_url.strip()).path.split("/")]
        try:
            idx = segments.index(self.bucket)
        except ValueError:
            return None
        tail = [segment for segment in segments[idx + 1 :] if segment]
        if not tail or any(part in {".", ".."} for part in tail):
            return None
        return "/".join(tail)
