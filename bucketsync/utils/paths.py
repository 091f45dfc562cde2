# BucketSync Path Utilities
# Root-relative access to the local source tree

import os
from pathlib import Path
from typing import BinaryIO

from bucketsync.errors import LocalIOError


def resolve_in_root(root: Path, relative_path: str) -> Path:
    """Join a slash-separated relative path onto the source root."""
    return root.joinpath(*relative_path.split("/"))


def list_all_files(root: Path) -> list[str]:
    """
    Recursively list regular files below root.

    Traversal is depth-first with entries in name order, so the result is
    deterministic. Symlinks and special files are skipped.

    Args:
        root: Source directory.

    Returns:
        Slash-separated paths relative to root.

    Raises:
        LocalIOError: If root or one of its subdirectories cannot be read.
    """
    if not root.is_dir():
        raise LocalIOError(f"Source directory does not exist: {root}", path=str(root))

    files: list[str] = []

    def walk(directory: Path, prefix: str) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            raise LocalIOError(f"Cannot list {directory}: {e}", path=str(directory)) from e

        for entry in entries:
            relative = f"{prefix}{entry.name}"
            if entry.is_dir(follow_symlinks=False):
                walk(Path(entry.path), f"{relative}/")
            elif entry.is_file(follow_symlinks=False):
                files.append(relative)

    walk(root, "")
    return files


def file_size(root: Path, relative_path: str) -> int:
    """
    Get the size of a file below root.

    Raises:
        LocalIOError: If the file vanished or cannot be stat'd.
    """
    path = resolve_in_root(root, relative_path)
    try:
        return path.stat().st_size
    except OSError as e:
        raise LocalIOError(f"Cannot stat {relative_path}: {e}", path=relative_path) from e


def open_file(root: Path, relative_path: str) -> BinaryIO:
    """
    Open a file below root for binary reading.

    Raises:
        LocalIOError: If the file cannot be opened.
    """
    path = resolve_in_root(root, relative_path)
    try:
        return open(path, "rb")
    except OSError as e:
        raise LocalIOError(f"Cannot open {relative_path}: {e}", path=relative_path) from e
