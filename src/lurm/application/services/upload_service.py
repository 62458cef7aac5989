from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass

from lurm.application.services.auth_service import AuthContext
from lurm.core.errors import RemoteWriteError, UploadError, ValidationError
from lurm.core.ids import new_resource_id
from lurm.domain.models.notification import Notification, Severity
from lurm.domain.models.resource import Resource, normalize_keywords, validate_resource
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo
from lurm.infrastructure.storage.store import BucketStore

logger = logging.getLogger(__name__)

FILE_UPLOAD_FAILED = "File Upload Failed"
RESOURCE_CREATION_FAILED = "Resource Creation Failed"


@dataclass(slots=True)
class ResourceDraft:
    name: str
    type: str
    course: str
    year: int | str | None
    description: str
    keywords: str | list[str] | None = None


@dataclass(slots=True)
class UploadedFile:
    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(slots=True)
class UploadResult:
    resource: Resource
    notification: Notification
    storage_path: str | None = None


def upload_failure_notification(exc: UploadError) -> Notification:
    return Notification(Severity.ERROR, exc.title, str(exc))


def _coerce_year(value: int | str | None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Year must be a positive whole number, got: {value!r}")
    if isinstance(value, int):
        return value
    raw = str(value or "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"Year must be a positive whole number, got: {raw!r}") from exc


class ResourceUploadService:
    def __init__(self, resource_repo: ResourceRepo, blob_store: BucketStore) -> None:
        self.resource_repo = resource_repo
        self.blob_store = blob_store

    def upload(self, draft: ResourceDraft, auth: AuthContext, file: UploadedFile | None = None) -> UploadResult:
        principal = auth.require_admin()

        resource = Resource(
            id=new_resource_id(),
            name=str(draft.name or "").strip(),
            type=str(draft.type or "").strip(),
            course=str(draft.course or "").strip(),
            year=_coerce_year(draft.year),
            description=str(draft.description or "").strip(),
            keywords=normalize_keywords(draft.keywords),
            uploader_id=principal.id,
        )
        validate_resource(resource)

        storage_path = None
        if file is not None:
            file_name = self._clean_filename(file.filename)
            storage_path = f"public/{resource.id}/{file_name}"
            try:
                stored = self.blob_store.upload_object(storage_path, file.content)
            except RemoteWriteError as exc:
                raise UploadError(FILE_UPLOAD_FAILED, str(exc)) from exc
            resource.file_url = stored.public_url
            resource.file_name = file_name
            resource.file_mime_type = (
                file.content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"
            )
            resource.file_size_bytes = stored.size_bytes

        try:
            self.resource_repo.insert(resource)
        except RemoteWriteError as exc:
            if storage_path:
                self._discard_stored_file(storage_path)
            raise UploadError(RESOURCE_CREATION_FAILED, str(exc)) from exc

        logger.info("Uploaded resource %s (%s)", resource.id, resource.name)
        return UploadResult(
            resource=resource,
            notification=Notification(Severity.SUCCESS, "Resource Uploaded!", f'"{resource.name}" has been added.'),
            storage_path=storage_path,
        )

    def _discard_stored_file(self, storage_path: str) -> None:
        try:
            self.blob_store.remove_object(storage_path)
        except RemoteWriteError as exc:
            logger.warning("Row insert failed and %s could not be removed: %s", storage_path, exc)

    @staticmethod
    def _clean_filename(filename: str | None) -> str:
        name = str(filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
        if not name or name in {".", ".."}:
            raise ValidationError("Uploaded file needs a file name.")
        return name
