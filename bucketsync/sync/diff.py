# BucketSync Diff Engine
# Classification of local files against the remote inventory

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from bucketsync.sync.item import HashedFile, LocalFile, RemoteInventory, RemoteObject
from bucketsync.sync.ordering import sort_by_order
from bucketsync.utils.hashing import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


@dataclass
class DiffResult:
    """Outcome of comparing the local tree with the bucket."""

    new: list[LocalFile] = field(default_factory=list)
    modified: list[LocalFile] = field(default_factory=list)
    unchanged: list[LocalFile] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Check if anything needs uploading or deleting."""
        return bool(self.new or self.modified or self.orphaned)


def is_size_change(local_file: LocalFile, remote: RemoteObject) -> bool:
    if local_file.size == remote.size:
        return False
    logger.debug(f"File size change ({remote.size} -> {local_file.size})")
    return True


def is_etag_change(local_file: HashedFile, remote: RemoteObject) -> bool:
    local_fingerprint = local_file.fingerprint
    remote_fingerprint = remote.fingerprint
    if local_fingerprint == remote_fingerprint:
        return False
    logger.debug(f"Etag changed ('{remote_fingerprint}' -> '{local_fingerprint}')")
    return True


def diff(
    local_files: Sequence[LocalFile],
    inventory: RemoteInventory,
    *,
    force_upload: bool = False,
    delete_orphaned: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    order: Sequence[str] = (),
) -> DiffResult:
    """
    Classify local files against the remote inventory.

    Both sides must already be filtered with the same include/exclude
    patterns. Sizes are compared before fingerprints so a size change
    never triggers hashing.

    Args:
        local_files: Filtered local files in traversal order.
        inventory: Filtered remote inventory.
        force_upload: Treat every file present on both sides as modified.
        delete_orphaned: Collect remote keys without a local counterpart.
        chunk_size: Multipart chunk size used for fingerprints.
        order: Upload priority globs applied to new and modified files.

    Returns:
        DiffResult with new/modified sorted by priority.

    Raises:
        LocalIOError: If a file cannot be hashed.
    """
    result = DiffResult()

    for local_file in local_files:
        remote = inventory.get(local_file.path)
        if remote is None:
            logger.debug(f"Add new file to list {local_file.path}")
            result.new.append(local_file)
        elif force_upload or is_size_change(local_file, remote):
            logger.debug(f"Add modified file to list {local_file.path}")
            result.modified.append(local_file)
        else:
            hashed = local_file.ensure_fingerprint(chunk_size)
            if is_etag_change(hashed, remote):
                logger.debug(f"Add modified file to list {local_file.path}")
                result.modified.append(hashed)
            else:
                result.unchanged.append(hashed)

    if delete_orphaned:
        local_paths = {f.path for f in local_files}
        for key in inventory:
            if key not in local_paths:
                logger.debug(f"Add orphaned file to list {key}")
                result.orphaned.append(key)

    result.new = sort_by_order(result.new, order)
    result.modified = sort_by_order(result.modified, order)
    return result
