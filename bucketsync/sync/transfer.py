# BucketSync Transfer Orchestrator
# Bounded-concurrency uploads and batched deletes

import logging
import mimetypes
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from bucketsync.config.schema import CacheControlRule
from bucketsync.errors import DeleteError, UploadError
from bucketsync.sync.item import LocalFile
from bucketsync.utils.hashing import DEFAULT_CHUNK_SIZE
from bucketsync.utils.patterns import matches_pattern

if TYPE_CHECKING:
    from bucketsync.remote.base import RemoteStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_CONCURRENCY = 5


@dataclass
class TransferResult:
    """Result of uploading one file."""

    file: LocalFile
    success: bool
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def path(self) -> str:
        return self.file.path


def resolve_content_type(path: str) -> str:
    """Guess the MIME type from the file extension."""
    content_type, _ = mimetypes.guess_type(path, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def resolve_cache_control(path: str, rules: Sequence[CacheControlRule]) -> Optional[str]:
    """
    Find the Cache-Control value for a path.

    Args:
        path: Relative path.
        rules: Ordered rules; the first matching glob wins.

    Returns:
        Header value, or None when no rule matches.
    """
    for rule in rules:
        if matches_pattern(path, rule.glob):
            return rule.value
    return None


class TransferOrchestrator:
    """
    Executes uploads and deletes against a remote store.

    Uploads run on a fixed-size thread pool; every outcome is collected
    before ``upload_all`` returns. Dry-run mode logs each operation and
    sends nothing.
    """

    def __init__(
        self,
        store: "RemoteStore",
        *,
        cache_control: Sequence[CacheControlRule] = (),
        concurrency: int = DEFAULT_CONCURRENCY,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        dry_run: bool = False,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Remote store to write to.
            cache_control: Ordered Cache-Control rules.
            concurrency: Maximum number of uploads in flight.
            chunk_size: Multipart part size, equal to the fingerprint chunk size.
            dry_run: If True, don't send anything.
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.store = store
        self.cache_control = list(cache_control)
        self.concurrency = concurrency
        self.chunk_size = chunk_size
        self.dry_run = dry_run

    def resolve_cache_control(self, path: str) -> Optional[str]:
        return resolve_cache_control(path, self.cache_control)

    def upload_file(self, local_file: LocalFile) -> TransferResult:
        """
        Upload a single file.

        Failures are returned, not raised, so sibling uploads continue.
        """
        content_type = resolve_content_type(local_file.path)
        cache_control = self.resolve_cache_control(local_file.path)

        logger.info(
            f"Uploading {self.store.describe(local_file.path)} (type={content_type}; Cache-Control={cache_control})"
        )

        if self.dry_run:
            return TransferResult(file=local_file, success=True, dry_run=True)

        try:
            with local_file.open() as body:
                self.store.put_object(
                    local_file.path,
                    body,
                    size=local_file.size,
                    content_type=content_type,
                    cache_control=cache_control,
                    chunk_size=self.chunk_size,
                )
        except Exception as e:
            logger.error(f"Error uploading to {self.store.full_key(local_file.path)}: {e}")
            return TransferResult(file=local_file, success=False, error=str(e))

        logger.debug(f"Uploaded {self.store.full_key(local_file.path)}")
        return TransferResult(file=local_file, success=True)

    def upload_all(self, files: Sequence[LocalFile]) -> list[TransferResult]:
        """
        Upload files with at most ``concurrency`` in flight.

        Files are submitted in the given (priority) order. The pool is
        drained before returning or raising.

        Args:
            files: Files to upload, already sorted.

        Returns:
            One TransferResult per file, in submission order.

        Raises:
            UploadError: If any upload failed, after all uploads finished.
        """
        if not files:
            return []

        results: dict[int, TransferResult] = {}
        with ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="upload") as executor:
            futures = {executor.submit(self.upload_file, f): index for index, f in enumerate(files)}
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        ordered = [results[index] for index in range(len(files))]
        failures = [(r.path, r.error or "unknown error") for r in ordered if not r.success]
        if failures:
            raise UploadError(failures, succeeded=[r.path for r in ordered if r.success])
        return ordered

    def wait_before_delete(self, milliseconds: int) -> None:
        """Pause before deleting so readers of the previous state can finish."""
        if self.dry_run or milliseconds <= 0:
            return
        logger.info(f"Wait {milliseconds} milliseconds before deleting files (prevent failed access to stale references)")
        time.sleep(milliseconds / 1000)

    def delete_all(self, keys: Sequence[str]) -> list[str]:
        """
        Delete keys in batches of at most the store's batch limit.

        Args:
            keys: Relative keys to delete.

        Returns:
            Keys the store reported as deleted (empty in dry-run mode).

        Raises:
            DeleteError: If the store refused some keys, after all batches ran.
        """
        if self.dry_run or not keys:
            return []

        batch_size = self.store.max_delete_batch
        deleted: list[str] = []
        failed: dict[str, str] = {}

        for start in range(0, len(keys), batch_size):
            outcome = self.store.delete_objects(keys[start : start + batch_size])
            for key in outcome.deleted:
                logger.info(f"Deleted {key}")
                deleted.append(key)
            for key, reason in outcome.failed.items():
                logger.error(f"Error deleting {key}: {reason}")
                failed[key] = reason

        if failed:
            raise DeleteError(failed, deleted=deleted)
        return deleted
