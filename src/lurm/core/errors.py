class LurmError(Exception):
    """Base error for all user-facing LURM exceptions."""


class ProjectNotInitializedError(LurmError):
    """Raised when .lurm metadata is missing."""


class ValidationError(LurmError):
    """Raised when a resource is missing required fields or breaks an invariant."""


class AuthorizationError(LurmError):
    """Raised when the current principal may not perform an admin action."""


class RemoteWriteError(LurmError):
    """Raised when the document store or blob store rejects a write.

    The message is the store's own message and is shown to users verbatim.
    """


class NotFoundOnRemove(RemoteWriteError):
    """Raised by the blob store when the object to remove does not exist."""


class UploadError(RemoteWriteError):
    """Raised when an admin upload fails at the file step or the row step.

    ``title`` tells the two apart; the message is the store's own.
    """

    def __init__(self, title: str, message: str) -> None:
        super().__init__(message)
        self.title = title


class CatalogLoadError(RemoteWriteError):
    """Raised when the resource list cannot be read from the document store."""


class DeletionInProgressError(LurmError):
    """Raised when a delete for the same resource id is already running."""
