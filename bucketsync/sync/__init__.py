# BucketSync Sync Module
# Core reconciliation engine and components

from bucketsync.sync.diff import DiffResult, diff
from bucketsync.sync.engine import SyncEngine, SyncResult
from bucketsync.sync.item import (
    HashedFile,
    LocalFile,
    RemoteInventory,
    RemoteObject,
    build_inventory,
    filter_inventory,
    scan_local_files,
)
from bucketsync.sync.ordering import sort_by_order, sort_key
from bucketsync.sync.transfer import (
    TransferOrchestrator,
    TransferResult,
    resolve_cache_control,
    resolve_content_type,
)

__all__ = [
    # Items
    "LocalFile",
    "HashedFile",
    "RemoteObject",
    "RemoteInventory",
    "build_inventory",
    "filter_inventory",
    "scan_local_files",
    # Diff
    "DiffResult",
    "diff",
    # Ordering
    "sort_key",
    "sort_by_order",
    # Transfer
    "TransferOrchestrator",
    "TransferResult",
    "resolve_content_type",
    "resolve_cache_control",
    # Engine
    "SyncEngine",
    "SyncResult",
]
