from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from lurm.core.config import AppPaths
from lurm.core.files import ensure_directory
from lurm.infrastructure.db.sqlite import initialize_schema
from lurm.infrastructure.storage.store import BucketStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InitResult:
    db_path: Path
    bucket: str
    bucket_dir: Path
    database_created: bool
    paths_created: list[Path] = field(default_factory=list)


class ProjectService:
    """Prepare the local document store and blob bucket for a project root."""

    def __init__(self, paths: AppPaths) -> None:
        self.paths = paths

    def bucket_store(self) -> BucketStore:
        return BucketStore(
            self.paths.storage_dir,
            bucket=self.paths.storage_bucket,
            public_base_url=self.paths.public_base_url,
        )

    def init_project(self) -> InitResult:
        store = self.bucket_store()
        missing = [p for p in (self.paths.lurm_dir, self.paths.storage_dir, store.bucket_dir) if not p.exists()]
        database_created = not self.paths.db_path.exists()

        ensure_directory(self.paths.lurm_dir)
        store.ensure_bucket_layout()
        # Schema statements are idempotent; rerunning init only fills gaps.
        initialize_schema(self.paths.db_path)

        if missing or database_created:
            logger.info("Initialized resource store at %s (bucket %s)", self.paths.lurm_dir, store.bucket)
        return InitResult(
            db_path=self.paths.db_path,
            bucket=store.bucket,
            bucket_dir=store.bucket_dir,
            database_created=database_created,
            paths_created=missing,
        )

    def is_initialized(self) -> bool:
        return self.paths.db_path.exists() and self.bucket_store().bucket_dir.is_dir()
