"""BucketSync - one-way synchronization of a local directory to S3.

Uploads new and changed files to a bucket (optionally under a key prefix),
detecting changes by comparing file sizes and S3-compatible ETags, and
optionally deletes remote objects that no longer exist locally.
"""

__version__ = "1.0.0"
__author__ = "Equitania Software GmbH"
__email__ = "info@equitania.de"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncResult",
    "DiffResult",
    "LocalFile",
    "HashedFile",
    "RemoteObject",
    "RemoteStore",
    "S3Store",
    "SyncSettings",
    "BucketSyncConfig",
    "load_config",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "SyncResult", "DiffResult", "LocalFile", "HashedFile", "RemoteObject"):
        from bucketsync import sync

        return getattr(sync, name)
    if name in ("RemoteStore", "S3Store"):
        from bucketsync import remote

        return getattr(remote, name)
    if name in ("SyncSettings", "BucketSyncConfig", "load_config"):
        from bucketsync import config

        return getattr(config, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
