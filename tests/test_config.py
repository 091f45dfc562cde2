# BucketSync Config Tests
# Tests for configuration loading and validation

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from bucketsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from bucketsync.config.loader import (
    build_config,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from bucketsync.config.schema import MIN_CHUNK_SIZE, BucketSyncConfig, CacheControlRule, SyncSettings


class TestSyncSettings:
    """Tests for SyncSettings schema."""

    def test_minimal(self, temp_dir: Path):
        settings = SyncSettings(bucket="site", source_dir=str(temp_dir), includes=["**"])
        assert settings.prefix == ""
        assert settings.excludes == []
        assert settings.concurrency == 5
        assert settings.delete_orphaned is False
        assert settings.wait_before_delete == 0

    def test_includes_required(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            SyncSettings(bucket="site", source_dir=str(temp_dir), includes=[])

    def test_multiline_globs(self, temp_dir: Path):
        settings = SyncSettings(bucket="site", source_dir=str(temp_dir), includes="**/*.html\n\n  *.css\n")
        assert settings.includes == ["**/*.html", "*.css"]

    def test_order_comma_string(self, temp_dir: Path):
        settings = SyncSettings(bucket="site", source_dir=str(temp_dir), includes=["**"], order="*.css, *.js,,")
        assert settings.order == ["*.css", "*.js"]

    def test_cache_control_strings(self, temp_dir: Path):
        settings = SyncSettings(
            bucket="site",
            source_dir=str(temp_dir),
            includes=["**"],
            cache_control=["*.html = no-cache", "assets/** = public, max-age=31536000"],
        )
        assert settings.cache_control[0] == CacheControlRule(glob="*.html", value="no-cache")
        assert settings.cache_control[1].value == "public, max-age=31536000"

    def test_cache_control_invalid(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            SyncSettings(bucket="site", source_dir=str(temp_dir), includes=["**"], cache_control=["no-cache"])

    def test_chunk_size_minimum(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            SyncSettings(bucket="site", source_dir=str(temp_dir), includes=["**"], chunk_size=MIN_CHUNK_SIZE - 1)

    def test_negative_wait(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            SyncSettings(bucket="site", source_dir=str(temp_dir), includes=["**"], wait_before_delete=-1)

    def test_source_dir_expanded(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("HOME", str(temp_dir))
        settings = SyncSettings(bucket="site", source_dir="~/public", includes=["**"])
        assert settings.source_dir == str(temp_dir / "public")


class TestCacheControlRule:
    """Tests for CacheControlRule.parse."""

    def test_split_at_first_equals(self):
        rule = CacheControlRule.parse("*.js=max-age=60")
        assert rule.glob == "*.js"
        assert rule.value == "max-age=60"

    def test_missing_equals(self):
        with pytest.raises(ValueError):
            CacheControlRule.parse("*.js")

    def test_empty_glob(self):
        with pytest.raises(ValueError):
            CacheControlRule.parse(" =no-cache")


class TestLoader:
    """Tests for configuration loading."""

    def test_load_config(self, config_file: Path, source_dir: Path):
        config = load_config(config_file)

        assert isinstance(config, BucketSyncConfig)
        assert config.sync.bucket == "my-site"
        assert config.sync.prefix == "www/"
        assert config.sync.source_dir == str(source_dir)
        assert config.sync.order == ["*.css", "*.js"]
        assert config.sync.cache_control[0].glob == "*.html"
        assert config.aws.region == "eu-central-1"
        assert config.aws.profile is None

    def test_defaults_filled_in(self, config_file: Path):
        config = load_config(config_file)
        assert config.sync.concurrency == DEFAULT_CONFIG["sync"]["concurrency"]
        assert config.sync.chunk_size == DEFAULT_CONFIG["sync"]["chunk_size"]

    def test_overrides(self, config_file: Path):
        config = load_config(config_file, {"sync": {"dry_run": True, "bucket": "other"}, "output": {"verbose": True}})
        assert config.sync.dry_run is True
        assert config.sync.bucket == "other"
        assert config.sync.prefix == "www/"
        assert config.output.verbose is True

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError, match="bucketsync config init"):
            load_config(temp_dir / "missing.yaml")

    def test_bucket_has_no_default(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            build_config({"sync": {"source_dir": str(temp_dir)}})

    def test_build_config_from_overrides(self, temp_dir: Path):
        config = build_config({}, {"sync": {"bucket": "site", "source_dir": str(temp_dir)}})
        assert config.sync.bucket == "site"
        assert config.sync.includes == ["**"]

    def test_config_path_env(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("BUCKETSYNC_CONFIG", str(temp_dir / "custom.yaml"))
        assert get_config_path() == temp_dir / "custom.yaml"

    def test_config_path_default(self, monkeypatch, temp_dir: Path):
        monkeypatch.delenv("BUCKETSYNC_CONFIG", raising=False)
        monkeypatch.chdir(temp_dir)
        assert get_config_path() == Path.cwd() / "bucketsync.yaml"

    def test_ensure_config_exists(self, temp_dir: Path):
        path = temp_dir / "bucketsync.yaml"
        assert ensure_config_exists(path) == (path, True)
        assert ensure_config_exists(path) == (path, False)
        assert "BucketSync Configuration" in path.read_text(encoding="utf-8")


class TestValidation:
    """Tests for validate_config_file."""

    def test_valid(self, config_file: Path):
        assert validate_config_file(config_file) == (True, [])

    def test_missing(self, temp_dir: Path):
        is_valid, errors = validate_config_file(temp_dir / "missing.yaml")
        assert not is_valid
        assert "not found" in errors[0]

    def test_empty(self, temp_dir: Path):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert validate_config_file(path) == (False, ["Configuration file is empty"])

    def test_invalid_yaml(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("sync: [unclosed", encoding="utf-8")
        is_valid, errors = validate_config_file(path)
        assert not is_valid
        assert "Invalid YAML" in errors[0]

    def test_missing_sync_section(self, temp_dir: Path):
        path = temp_dir / "nosync.yaml"
        path.write_text("aws:\n  region: eu-west-1\n", encoding="utf-8")
        assert validate_config_file(path) == (False, ["Missing 'sync' section"])

    def test_invalid_values(self, temp_dir: Path, sample_config: dict):
        sample_config["sync"]["concurrency"] = 0
        path = temp_dir / "invalid.yaml"
        path.write_text(yaml.dump(sample_config), encoding="utf-8")

        is_valid, errors = validate_config_file(path)
        assert not is_valid
        assert any("concurrency" in e for e in errors)


class TestDefaults:
    """Tests for default configuration."""

    def test_generated_yaml_is_valid(self):
        data = yaml.safe_load(generate_default_config())
        config = BucketSyncConfig.model_validate(data)
        assert config.sync.includes == ["**"]
        assert ".DS_Store" in config.sync.excludes
