# BucketSync Errors
# Failure kinds raised by the sync core

from typing import Optional


class SyncError(Exception):
    """Base class for failures that abort a sync run."""


class ListingError(SyncError):
    """Remote listing failed (unreachable store or non-success status)."""


class LocalIOError(SyncError):
    """A local file vanished or could not be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class UploadError(SyncError):
    """
    One or more uploads failed.

    Raised only after every upload of the batch has finished, so
    ``failures`` holds the complete list of ``(path, error)`` pairs and
    ``succeeded`` the paths that did reach the store.
    """

    def __init__(self, failures: list[tuple[str, str]], succeeded: Optional[list[str]] = None):
        self.failures = failures
        self.succeeded = succeeded or []
        names = ", ".join(path for path, _ in failures)
        super().__init__(f"{len(failures)} upload(s) failed: {names}")


class DeleteError(SyncError):
    """The store refused to delete some keys."""

    def __init__(self, failed: dict[str, str], deleted: Optional[list[str]] = None):
        self.failed = failed
        self.deleted = deleted or []
        super().__init__(f"{len(failed)} delete(s) failed: {', '.join(sorted(failed))}")
