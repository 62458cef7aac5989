from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lurm.domain.models.notification import Notification


class StorageOutcome(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    DELETED = "deleted"
    ALREADY_ABSENT = "already_absent"
    PATH_UNDETERMINED = "path_undetermined"
    FAILED = "failed"


class DeletionStatus(str, Enum):
    FULL_SUCCESS = "full_success"
    PARTIAL_SUCCESS = "partial_success"
    HARD_FAILURE = "hard_failure"


@dataclass(frozen=True, slots=True)
class DeletionResult:
    resource_id: str
    status: DeletionStatus
    storage_outcome: StorageOutcome
    notification: Notification
    storage_path: str | None = None
    storage_error: str | None = None
    row_error: str | None = None
    row_found: bool = True

    @property
    def succeeded(self) -> bool:
        return self.status is not DeletionStatus.HARD_FAILURE
