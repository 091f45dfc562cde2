# BucketSync Sync Items
# Local files, remote objects and the remote inventory

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from bucketsync.utils.hashing import DEFAULT_CHUNK_SIZE, file_fingerprint, normalize_etag
from bucketsync.utils.paths import file_size, list_all_files, open_file, resolve_in_root
from bucketsync.utils.patterns import glob_filter


@dataclass(frozen=True)
class LocalFile:
    """
    A file of the source tree, before hashing.

    ``path`` is relative to ``root`` and slash-separated, so it compares
    directly with remote keys.
    """

    path: str
    size: int
    root: Path

    @classmethod
    def from_path(cls, root: Path, relative_path: str) -> "LocalFile":
        """Create a LocalFile, stat'ing it below root."""
        return cls(path=relative_path, size=file_size(root, relative_path), root=root)

    @property
    def absolute_path(self) -> Path:
        """Location of the file on disk."""
        return resolve_in_root(self.root, self.path)

    def open(self) -> BinaryIO:
        """Open the file for binary reading."""
        return open_file(self.root, self.path)

    def ensure_fingerprint(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "HashedFile":
        """
        Produce the hashed variant of this file.

        Args:
            chunk_size: Multipart chunk size the fingerprint must match.

        Returns:
            HashedFile carrying the ETag-compatible fingerprint.

        Raises:
            LocalIOError: If the file cannot be read.
        """
        fingerprint = file_fingerprint(self.absolute_path, chunk_size=chunk_size)
        return HashedFile(
            path=self.path,
            size=self.size,
            root=self.root,
            fingerprint=fingerprint,
            chunk_size=chunk_size,
        )


@dataclass(frozen=True)
class HashedFile(LocalFile):
    """A local file whose fingerprint has been computed."""

    fingerprint: str
    chunk_size: int

    def ensure_fingerprint(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "HashedFile":
        if chunk_size == self.chunk_size:
            return self
        return super().ensure_fingerprint(chunk_size)


@dataclass(frozen=True)
class RemoteObject:
    """An object already in the bucket, keyed relative to the prefix."""

    key: str
    size: int
    etag: str

    @property
    def fingerprint(self) -> str:
        """ETag without the store's quoting."""
        return normalize_etag(self.etag)


RemoteInventory = dict[str, RemoteObject]


def build_inventory(objects: Iterable[RemoteObject]) -> RemoteInventory:
    """Index remote objects by relative key."""
    return {obj.key: obj for obj in objects}


def filter_inventory(inventory: RemoteInventory, includes: Sequence[str], excludes: Sequence[str]) -> RemoteInventory:
    """Keep the remote objects whose keys pass the include/exclude filter."""
    keep = glob_filter(includes, excludes)
    return {key: obj for key, obj in inventory.items() if keep(key)}


def scan_local_files(root: Path, includes: Sequence[str], excludes: Sequence[str]) -> list[LocalFile]:
    """
    Enumerate and filter the source tree.

    Args:
        root: Source directory.
        includes: Include patterns.
        excludes: Exclude patterns.

    Returns:
        LocalFile objects in traversal order.

    Raises:
        LocalIOError: If the tree cannot be listed or a file vanished.
    """
    keep = glob_filter(includes, excludes)
    return [LocalFile.from_path(root, path) for path in list_all_files(root) if keep(path)]
