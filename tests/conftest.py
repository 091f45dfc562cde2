# BucketSync Test Fixtures
# Pytest fixtures and an in-memory object store for BucketSync tests

import hashlib
import logging
import tempfile
import threading
from collections.abc import Generator, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

import pytest
import yaml

from bucketsync.errors import ListingError, SyncError
from bucketsync.remote.base import DeleteOutcome, RemoteStore
from bucketsync.sync.item import RemoteObject


def s3_etag(content: bytes, chunk_size: int) -> str:
    """ETag as S3 reports it, for an upload with the given part size."""
    if len(content) < chunk_size:
        return f'"{hashlib.md5(content).hexdigest()}"'
    parts = [content[i : i + chunk_size] for i in range(0, len(content), chunk_size)]
    combined = hashlib.md5(b"".join(hashlib.md5(part).digest() for part in parts)).hexdigest()
    return f'"{combined}-{len(parts)}"'


@dataclass
class StoredObject:
    content: bytes
    etag: str
    content_type: Optional[str] = None
    cache_control: Optional[str] = None


class InMemoryStore(RemoteStore):
    """Remote store keeping objects in a dict and recording every call."""

    def __init__(self, bucket: str = "test-bucket", prefix: str = ""):
        super().__init__(bucket, prefix)
        self.objects: dict[str, StoredObject] = {}
        self.put_calls: list[str] = []
        self.delete_calls: list[list[str]] = []
        self.fail_uploads: set[str] = set()
        self.fail_deletes: set[str] = set()
        self.fail_listing = False
        self._lock = threading.Lock()

    def add(self, key: str, content: bytes, *, chunk_size: int = 16 * 1024 * 1024) -> None:
        """Seed an object under the full key."""
        self.objects[key] = StoredObject(content=content, etag=s3_etag(content, chunk_size))

    def list_objects(self) -> Iterator[RemoteObject]:
        if self.fail_listing:
            raise ListingError("store unreachable")
        for full_key, obj in sorted(self.objects.items()):
            if not full_key.startswith(self.prefix):
                continue
            key = self.relative_key(full_key)
            if key:
                yield RemoteObject(key=key, size=len(obj.content), etag=obj.etag)

    def put_object(
        self,
        key: str,
        body: BinaryIO,
        *,
        size: int,
        content_type: str,
        cache_control: Optional[str],
        chunk_size: int,
    ) -> None:
        with self._lock:
            self.put_calls.append(key)
        if key in self.fail_uploads:
            raise SyncError(f"upload of {key} rejected")
        content = body.read()
        with self._lock:
            self.objects[self.full_key(key)] = StoredObject(
                content=content,
                etag=s3_etag(content, chunk_size),
                content_type=content_type,
                cache_control=cache_control,
            )

    def delete_objects(self, keys: Sequence[str]) -> DeleteOutcome:
        self.delete_calls.append(list(keys))
        outcome = DeleteOutcome()
        for key in keys:
            if key in self.fail_deletes:
                outcome.failed[key] = "AccessDenied: Access Denied"
                continue
            self.objects.pop(self.full_key(key), None)
            outcome.deleted.append(key)
        return outcome


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo setup_logging so caplog sees the package's records."""
    yield
    logger = logging.getLogger("bucketsync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a small site tree."""
    root = temp_dir / "public"
    root.mkdir()

    (root / "index.html").write_text("<html>home</html>", encoding="utf-8")
    (root / "app.js").write_text("console.log('app');", encoding="utf-8")
    (root / "css").mkdir()
    (root / "css" / "site.css").write_text("body { margin: 0; }", encoding="utf-8")
    (root / "img").mkdir()
    (root / "img" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nlogo")
    (root / ".DS_Store").write_bytes(b"\x00\x01")

    return root


@pytest.fixture
def store() -> InMemoryStore:
    """Create an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def sample_config(source_dir: Path) -> dict:
    """Create sample configuration dict."""
    return {
        "sync": {
            "bucket": "my-site",
            "prefix": "www/",
            "source_dir": str(source_dir),
            "includes": ["**"],
            "excludes": [".DS_Store"],
            "order": ["*.css", "*.js"],
            "cache_control": ["*.html=no-cache", "img/**=public, max-age=31536000"],
            "delete_orphaned": True,
        },
        "aws": {"region": "eu-central-1"},
        "output": {"verbose": False, "colored": False},
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: dict) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "bucketsync.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    return config_path
