from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from lurm.application.services.auth_service import AuthContext
from lurm.core.errors import DeletionInProgressError, NotFoundOnRemove, ValidationError
from lurm.domain.models.deletion import DeletionResult, DeletionStatus, StorageOutcome
from lurm.domain.models.notification import Notification, Severity
from lurm.domain.models.resource import Resource
from lurm.infrastructure.storage.paths import StoragePathResolver

logger = logging.getLogger(__name__)

_STORAGE_NOTES = {
    StorageOutcome.NOT_APPLICABLE: "",
    StorageOutcome.DELETED: "",
    StorageOutcome.ALREADY_ABSENT: "Its file was already gone from storage.",
    StorageOutcome.PATH_UNDETERMINED: (
        "The storage location of its file could not be determined; the file may need manual cleanup."
    ),
}


class ResourceRowStore(Protocol):
    def delete(self, resource_id: str) -> bool: ...


class ObjectRemover(Protocol):
    def remove_object(self, object_path: str) -> None: ...


class InFlightRegistry:
    """Per-resource flag marking a delete that has not finished yet."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids: set[str] = set()

    def acquire(self, resource_id: str) -> bool:
        with self._lock:
            if resource_id in self._ids:
                return False
            self._ids.add(resource_id)
            return True

    def release(self, resource_id: str) -> None:
        with self._lock:
            self._ids.discard(resource_id)


class ResourceDeletionService:
    """Remove a resource's stored file, then its row, and report one outcome.

    Storage problems never stop the row delete: a leftover file can be cleaned
    up by hand, a leftover row keeps showing in the catalog. Only a failed row
    delete is a hard failure.
    """

    def __init__(
        self,
        resource_repo: ResourceRowStore,
        blob_store: ObjectRemover,
        path_resolver: StoragePathResolver,
        in_flight: InFlightRegistry | None = None,
    ) -> None:
        self.resource_repo = resource_repo
        self.blob_store = blob_store
        self.path_resolver = path_resolver
        self.in_flight = in_flight or InFlightRegistry()

    def delete(
        self,
        resource: Resource,
        auth: AuthContext,
        on_deleted: Callable[[str], None] | None = None,
    ) -> DeletionResult:
        auth.require_admin()
        resource_id = str(resource.id or "").strip()
        if not resource_id:
            raise ValidationError("Resource id is required for deletion.")
        if not self.in_flight.acquire(resource_id):
            raise DeletionInProgressError(f"Resource {resource_id} is already being deleted.")

        try:
            storage_outcome, storage_path, storage_error = self._remove_stored_file(resource)
            result = self._delete_row(resource, storage_outcome, storage_path, storage_error)
        finally:
            self.in_flight.release(resource_id)

        if result.succeeded and on_deleted is not None:
            on_deleted(resource_id)
        return result

    def _remove_stored_file(self, resource: Resource) -> tuple[StorageOutcome, str | None, str | None]:
        if not resource.has_file:
            return StorageOutcome.NOT_APPLICABLE, None, None

        storage_path = self.path_resolver.resolve_storage_path(resource.file_url or "")
        if storage_path is None:
            logger.warning("Could not determine storage path for %s from %s", resource.id, resource.file_url)
            return StorageOutcome.PATH_UNDETERMINED, None, None

        try:
            self.blob_store.remove_object(storage_path)
        except NotFoundOnRemove:
            logger.info("Stored file %s for %s was already absent", storage_path, resource.id)
            return StorageOutcome.ALREADY_ABSENT, storage_path, None
        except Exception as exc:
            logger.warning("Failed to remove stored file %s for %s: %s", storage_path, resource.id, exc)
            return StorageOutcome.FAILED, storage_path, str(exc)
        return StorageOutcome.DELETED, storage_path, None

    def _delete_row(
        self,
        resource: Resource,
        storage_outcome: StorageOutcome,
        storage_path: str | None,
        storage_error: str | None,
    ) -> DeletionResult:
        try:
            row_found = self.resource_repo.delete(resource.id)
        except Exception as exc:
            logger.error("Failed to delete resource row %s: %s", resource.id, exc)
            return DeletionResult(
                resource_id=resource.id,
                status=DeletionStatus.HARD_FAILURE,
                storage_outcome=storage_outcome,
                notification=Notification(Severity.ERROR, "Deletion Failed", str(exc)),
                storage_path=storage_path,
                storage_error=storage_error,
                row_error=str(exc),
                row_found=False,
            )

        if row_found and storage_outcome in (StorageOutcome.DELETED, StorageOutcome.NOT_APPLICABLE):
            status = DeletionStatus.FULL_SUCCESS
        else:
            status = DeletionStatus.PARTIAL_SUCCESS
        logger.info(
            "Deleted resource %s (row_found=%s, storage=%s)",
            resource.id,
            row_found,
            storage_outcome.value,
        )
        return DeletionResult(
            resource_id=resource.id,
            status=status,
            storage_outcome=storage_outcome,
            notification=self._success_notification(resource, storage_outcome, storage_error, row_found),
            storage_path=storage_path,
            storage_error=storage_error,
            row_found=row_found,
        )

    @staticmethod
    def _success_notification(
        resource: Resource,
        storage_outcome: StorageOutcome,
        storage_error: str | None,
        row_found: bool,
    ) -> Notification:
        label = resource.name or resource.id
        head = f'"{label}" has been deleted.' if row_found else f'"{label}" was already deleted.'
        if storage_outcome is StorageOutcome.FAILED:
            return Notification(
                Severity.WARNING,
                "Resource Deleted With Warnings",
                f"{head} Its file may still exist in storage: {storage_error}",
            )
        note = _STORAGE_NOTES[storage_outcome]
        return Notification(Severity.SUCCESS, "Resource Deleted", f"{head} {note}".strip())
