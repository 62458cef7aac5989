from __future__ import annotations

from lurm.application.services.project_service import ProjectService
from lurm.cli.context import CLIContext
from lurm.core.errors import ProjectNotInitializedError
from lurm.domain.models.notification import Notification, Severity
from lurm.infrastructure.storage.store import BucketStore

_SEVERITY_STYLES = {
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


def require_initialized(ctx: CLIContext) -> None:
    if not ProjectService(ctx.paths).is_initialized():
        raise ProjectNotInitializedError(
            f"Project is not initialized. Run 'lurm init' first in {ctx.paths.project_root}"
        )


def bucket_store(ctx: CLIContext) -> BucketStore:
    return ProjectService(ctx.paths).bucket_store()


def print_notification(ctx: CLIContext, notification: Notification) -> None:
    style = _SEVERITY_STYLES[notification.severity]
    ctx.console.print(f"[{style}]{notification.title}[/{style}] {notification.description}")
