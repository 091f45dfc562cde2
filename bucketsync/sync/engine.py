# BucketSync Sync Engine
# List, diff and sync pipeline for one run

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from bucketsync.config.schema import SyncSettings
from bucketsync.errors import DeleteError, SyncError, UploadError
from bucketsync.sync.diff import DiffResult, diff
from bucketsync.sync.item import RemoteInventory, build_inventory, filter_inventory, scan_local_files
from bucketsync.sync.transfer import TransferOrchestrator

if TYPE_CHECKING:
    from bucketsync.remote.base import RemoteStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    success: bool
    added: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    dry_run: bool = False
    error: Optional[str] = None
    failures: list[str] = field(default_factory=list)
    plan: Optional[DiffResult] = None

    @property
    def total_changes(self) -> int:
        return self.added + self.updated + self.deleted


class SyncEngine:
    """
    Main synchronization engine.

    Lists both sides, classifies every path, uploads new and modified
    files, then deletes orphans. Deletes never run after a failure.
    """

    def __init__(self, settings: SyncSettings, store: "RemoteStore"):
        """
        Initialize sync engine.

        Args:
            settings: Sync settings.
            store: Remote store the tree is synchronized to.
        """
        self.settings = settings
        self.store = store
        self.source_dir = Path(settings.source_dir)
        self.transfer = TransferOrchestrator(
            store,
            cache_control=settings.cache_control,
            concurrency=settings.concurrency,
            chunk_size=settings.chunk_size,
            dry_run=settings.dry_run,
        )

    def list_remote(self) -> RemoteInventory:
        """List and filter the remote side."""
        inventory = build_inventory(self.store.list_objects())
        return filter_inventory(inventory, self.settings.includes, self.settings.excludes)

    def plan(self) -> DiffResult:
        """
        Classify the local tree against the bucket without changing anything.

        Remote listing runs in a background thread while the local tree
        is enumerated; both finish before diffing.

        Raises:
            ListingError: If the bucket cannot be listed.
            LocalIOError: If the local tree cannot be read.
        """
        settings = self.settings

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="listing") as executor:
            remote_future = executor.submit(self.list_remote)
            try:
                local_files = scan_local_files(self.source_dir, settings.includes, settings.excludes)
            finally:
                # Surface a listing failure even when the local scan failed too
                inventory = remote_future.result()

        logger.debug(f"Found {len(local_files)} local files and {len(inventory)} remote objects")

        return diff(
            local_files,
            inventory,
            force_upload=settings.force_upload,
            delete_orphaned=settings.delete_orphaned,
            chunk_size=settings.chunk_size,
            order=settings.order,
        )

    def sync(self) -> SyncResult:
        """
        Run list, diff and sync.

        Returns:
            SyncResult; ``success`` is False with ``error`` set when any
            phase failed. ``added``, ``updated`` and ``deleted`` count
            completed operations (planned ones in dry-run mode).
        """
        settings = self.settings
        result = SyncResult(success=True, dry_run=settings.dry_run)

        logger.info(
            f"Sync files from {self.source_dir} (includes={settings.includes}, "
            f"excludes={settings.excludes}, order={settings.order})"
        )

        # Counters only ever reflect completed work
        try:
            plan = self.plan()
            result.plan = plan
            result.unchanged = len(plan.unchanged)

            if plan.new:
                logger.info(f"Upload {len(plan.new)} new files")
                try:
                    result.added = len(self.transfer.upload_all(plan.new))
                except UploadError as e:
                    result.added = len(e.succeeded)
                    raise

            if plan.modified:
                logger.info(f"Upload {len(plan.modified)} modified files (force={settings.force_upload})")
                try:
                    result.updated = len(self.transfer.upload_all(plan.modified))
                except UploadError as e:
                    result.updated = len(e.succeeded)
                    raise

            if plan.orphaned:
                self.transfer.wait_before_delete(settings.wait_before_delete)
                logger.info(f"Delete {len(plan.orphaned)} orphaned files")
                try:
                    deleted = self.transfer.delete_all(plan.orphaned)
                except DeleteError as e:
                    result.deleted = len(e.deleted)
                    raise
                result.deleted = len(plan.orphaned) if settings.dry_run else len(deleted)
        except UploadError as e:
            result.success = False
            result.error = str(e)
            result.failures = [f"{path}: {reason}" for path, reason in e.failures]
            logger.error(f"Sync failed: {e}")
            return result
        except DeleteError as e:
            result.success = False
            result.error = str(e)
            result.failures = [f"{key}: {reason}" for key, reason in sorted(e.failed.items())]
            logger.error(f"Sync failed: {e}")
            return result
        except SyncError as e:
            result.success = False
            result.error = str(e)
            logger.error(f"Sync failed: {e}")
            return result

        logger.info(f"Complete ({result.added} added, {result.updated} updated, {result.deleted} deleted)")
        return result
