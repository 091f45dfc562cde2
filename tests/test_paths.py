# Tests for bucketsync.utils.paths and bucketsync.sync.item
# Source tree enumeration and local/remote items

import os

import pytest

from bucketsync.errors import LocalIOError
from bucketsync.sync.item import (
    HashedFile,
    LocalFile,
    RemoteObject,
    build_inventory,
    filter_inventory,
    scan_local_files,
)
from bucketsync.utils.paths import file_size, list_all_files, resolve_in_root


class TestListAllFiles:
    """Tests for list_all_files."""

    def test_relative_slash_paths(self, source_dir):
        files = list_all_files(source_dir)
        assert files == [".DS_Store", "app.js", "css/site.css", "img/logo.png", "index.html"]

    def test_empty_directories_skipped(self, temp_dir):
        (temp_dir / "empty").mkdir()
        (temp_dir / "a.txt").write_text("a", encoding="utf-8")
        assert list_all_files(temp_dir) == ["a.txt"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_skipped(self, temp_dir):
        target = temp_dir / "real.txt"
        target.write_text("x", encoding="utf-8")
        (temp_dir / "link.txt").symlink_to(target)
        assert list_all_files(temp_dir) == ["real.txt"]

    def test_missing_root(self, temp_dir):
        with pytest.raises(LocalIOError):
            list_all_files(temp_dir / "missing")

    def test_root_is_file(self, temp_dir):
        f = temp_dir / "file.txt"
        f.write_text("x", encoding="utf-8")
        with pytest.raises(LocalIOError):
            list_all_files(f)


class TestPathHelpers:
    """Tests for path helpers."""

    def test_resolve_in_root(self, temp_dir):
        assert resolve_in_root(temp_dir, "css/site.css") == temp_dir / "css" / "site.css"

    def test_file_size(self, source_dir):
        assert file_size(source_dir, "index.html") == len("<html>home</html>")

    def test_file_size_missing(self, source_dir):
        with pytest.raises(LocalIOError) as exc_info:
            file_size(source_dir, "gone.html")
        assert exc_info.value.path == "gone.html"


class TestLocalFile:
    """Tests for LocalFile and HashedFile."""

    def test_from_path(self, source_dir):
        f = LocalFile.from_path(source_dir, "css/site.css")
        assert f.path == "css/site.css"
        assert f.size == len("body { margin: 0; }")
        assert f.absolute_path == source_dir / "css" / "site.css"

    def test_open(self, source_dir):
        f = LocalFile.from_path(source_dir, "app.js")
        with f.open() as body:
            assert body.read() == b"console.log('app');"

    def test_ensure_fingerprint(self, source_dir):
        f = LocalFile.from_path(source_dir, "index.html")
        hashed = f.ensure_fingerprint()
        assert isinstance(hashed, HashedFile)
        assert hashed.path == f.path
        assert hashed.size == f.size
        assert len(hashed.fingerprint) == 32

    def test_hashed_file_reused_for_same_chunk_size(self, source_dir):
        hashed = LocalFile.from_path(source_dir, "index.html").ensure_fingerprint(1024)
        assert hashed.ensure_fingerprint(1024) is hashed

    def test_hashed_file_rehashed_for_other_chunk_size(self, source_dir):
        hashed = LocalFile.from_path(source_dir, "index.html").ensure_fingerprint(4)
        rehashed = hashed.ensure_fingerprint(1024)
        assert rehashed.chunk_size == 1024
        assert rehashed.fingerprint != hashed.fingerprint

    def test_frozen(self, source_dir):
        f = LocalFile.from_path(source_dir, "index.html")
        with pytest.raises(AttributeError):
            f.size = 0


class TestScanLocalFiles:
    """Tests for scan_local_files."""

    def test_filters_applied(self, source_dir):
        files = scan_local_files(source_dir, ["**"], [".DS_Store", "img/**"])
        assert [f.path for f in files] == ["app.js", "css/site.css", "index.html"]

    def test_include_subset(self, source_dir):
        files = scan_local_files(source_dir, ["*.html", "*.css"], [])
        assert [f.path for f in files] == ["css/site.css", "index.html"]


class TestRemoteInventory:
    """Tests for RemoteObject and inventory helpers."""

    def test_fingerprint_strips_quotes(self):
        obj = RemoteObject(key="a.txt", size=1, etag='"abc-2"')
        assert obj.fingerprint == "abc-2"

    def test_build_inventory(self):
        objects = [RemoteObject("a", 1, '"x"'), RemoteObject("b/c", 2, '"y"')]
        inventory = build_inventory(objects)
        assert list(inventory) == ["a", "b/c"]
        assert inventory["b/c"].size == 2

    def test_filter_inventory(self):
        inventory = build_inventory(
            [RemoteObject("index.html", 1, '"x"'), RemoteObject("logs/access.log", 2, '"y"')]
        )
        filtered = filter_inventory(inventory, ["**"], ["logs/**"])
        assert list(filtered) == ["index.html"]
