# BucketSync Utilities Module
# Helper functions for pattern matching, hashing and local paths

from bucketsync.utils.hashing import (
    DEFAULT_CHUNK_SIZE,
    content_fingerprint,
    file_fingerprint,
    normalize_etag,
)
from bucketsync.utils.paths import (
    file_size,
    list_all_files,
    open_file,
    resolve_in_root,
)
from bucketsync.utils.patterns import (
    expand_braces,
    first_match,
    glob_filter,
    matches_pattern,
)

__all__ = [
    # Patterns
    "expand_braces",
    "matches_pattern",
    "first_match",
    "glob_filter",
    # Hashing
    "DEFAULT_CHUNK_SIZE",
    "content_fingerprint",
    "file_fingerprint",
    "normalize_etag",
    # Paths
    "resolve_in_root",
    "list_all_files",
    "file_size",
    "open_file",
]
