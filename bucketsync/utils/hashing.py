# BucketSync Hashing Utilities
# Local reproduction of the S3 ETag scheme for change detection

import hashlib
from pathlib import Path

from bucketsync.errors import LocalIOError

# Shared by fingerprinting and multipart upload; both must agree.
DEFAULT_CHUNK_SIZE = 16 * 1024 * 1024

_READ_SIZE = 1024 * 1024


def content_fingerprint(content: bytes, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Calculate the ETag-compatible fingerprint of in-memory content.

    Args:
        content: Raw bytes.
        chunk_size: Multipart chunk size.

    Returns:
        Plain MD5 hex for content smaller than chunk_size, otherwise the
        multipart form ``<md5 of part digests>-<part count>``.
    """
    if len(content) < chunk_size:
        return hashlib.md5(content).hexdigest()

    digests = [hashlib.md5(content[offset : offset + chunk_size]).digest() for offset in range(0, len(content), chunk_size)]
    return f"{hashlib.md5(b''.join(digests)).hexdigest()}-{len(digests)}"


def file_fingerprint(path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Calculate the ETag-compatible fingerprint of a file.

    The file is streamed; a file of at least chunk_size bytes is hashed
    part by part exactly as a multipart upload with that part size would
    be, so the result equals the ETag the store reports for it.

    Args:
        path: Path to file.
        chunk_size: Multipart chunk size.

    Returns:
        Fingerprint string.

    Raises:
        LocalIOError: If the file cannot be read.
    """
    try:
        size = path.stat().st_size
        whole = hashlib.md5()
        part_digests: list[bytes] = []

        with open(path, "rb") as f:
            if size < chunk_size:
                while chunk := f.read(_READ_SIZE):
                    whole.update(chunk)
                return whole.hexdigest()

            part = hashlib.md5()
            part_filled = 0
            while chunk := f.read(min(_READ_SIZE, chunk_size - part_filled)):
                part.update(chunk)
                part_filled += len(chunk)
                if part_filled == chunk_size:
                    part_digests.append(part.digest())
                    part = hashlib.md5()
                    part_filled = 0
            if part_filled:
                part_digests.append(part.digest())
    except OSError as e:
        raise LocalIOError(f"Cannot read {path}: {e}", path=str(path)) from e

    return f"{hashlib.md5(b''.join(part_digests)).hexdigest()}-{len(part_digests)}"


def normalize_etag(etag: str) -> str:
    """
    Strip the quoting the store puts around ETags.

    Args:
        etag: Raw ETag, e.g. ``"abc"`` or ``W/"abc-2"``.

    Returns:
        Bare fingerprint.
    """
    value = etag.strip()
    if value.startswith("W/"):
        value = value[2:]
    return value.strip('"')
