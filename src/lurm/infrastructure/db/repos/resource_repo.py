from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from lurm.core.errors import CatalogLoadError, RemoteWriteError
from lurm.core.time import now_utc_iso
from lurm.domain.models.resource import Resource
from lurm.infrastructure.db.sqlite import get_connection

logger = logging.getLogger(__name__)


class ResourceRepo:
    """Document store for resource rows."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def insert(self, resource: Resource) -> None:
        created_at = resource.created_at or now_utc_iso()
        updated_at = resource.updated_at or created_at
        try:
            with get_connection(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO resources (
                        id,
                        name,
                        type,
                        course,
                        year,
                        description,
                        keywords_json,
                        file_url,
                        file_name,
                        file_mime_type,
                        file_size_bytes,
                        uploader_id,
                        created_at,
                        updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        resource.id,
                        resource.name,
                        resource.type,
                        resource.course,
                        resource.year,
                        resource.description,
                        json.dumps(list(resource.keywords), ensure_ascii=True),
                        resource.file_url,
                        resource.file_name,
                        resource.file_mime_type,
                        resource.file_size_bytes,
                        resource.uploader_id,
                        created_at,
                        updated_at,
                    ),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise RemoteWriteError(str(exc)) from exc
        resource.created_at = created_at
        resource.updated_at = updated_at

    def delete(self, resource_id: str) -> bool:
        """Delete the row with exactly this id. Returns False when no row matched."""
        try:
            with get_connection(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM resources WHERE id = ?", (resource_id,))
                conn.commit()
        except sqlite3.Error as exc:
            raise RemoteWriteError(str(exc)) from exc
        return cursor.rowcount > 0

    def get_by_id(self, resource_id: str) -> Resource | None:
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM resources WHERE id = ?",
                (resource_id,),
            ).fetchone()
        return self._to_model(row) if row else None

    def list(self) -> list[Resource]:
        try:
            with get_connection(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT * FROM resources ORDER BY created_at DESC, rowid DESC"
                ).fetchall()
        except sqlite3.Error as exc:
            raise CatalogLoadError(f"Failed to load resources: {exc}") from exc
        return [self._to_model(row) for row in rows]

    @staticmethod
    def _to_model(row) -> Resource:
        return Resource(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            course=row["course"],
            year=int(row["year"]),
            description=row["description"],
            keywords=ResourceRepo._parse_keywords(row["keywords_json"]),
            file_url=row["file_url"],
            file_name=row["file_name"],
            file_mime_type=row["file_mime_type"],
            file_size_bytes=row["file_size_bytes"],
            uploader_id=row["uploader_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _parse_keywords(raw: str | None) -> list[str]:
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed keywords_json value: %r", raw)
            return []
        if not isinstance(parsed, list):
            return []
        return [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
