# BucketSync Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from bucketsync.utils.hashing import DEFAULT_CHUNK_SIZE

# Smallest part size S3 accepts for all but the last part of a multipart upload.
MIN_CHUNK_SIZE = 5 * 1024 * 1024


class CacheControlRule(BaseModel):
    """A glob and the Cache-Control header for files matching it."""

    glob: str = Field(description="Glob pattern")
    value: str = Field(description="Cache-Control header value")

    @classmethod
    def parse(cls, line: str) -> "CacheControlRule":
        """
        Parse a ``glob=value`` line.

        The line is split at the first ``=``; both sides are trimmed.

        Raises:
            ValueError: If the line has no ``=`` or an empty glob.
        """
        glob, sep, value = line.partition("=")
        if not sep or not glob.strip():
            raise ValueError(f"Invalid cache-control rule (expected glob=value): {line!r}")
        return cls(glob=glob.strip(), value=value.strip())


class SyncSettings(BaseModel):
    """What to sync, where, and how."""

    bucket: str = Field(min_length=1, description="Target bucket name")
    prefix: str = Field(default="", description="Key prefix, prepended verbatim (e.g. 'www/')")
    source_dir: str = Field(description="Local directory to sync from")
    includes: list[str] = Field(min_length=1, description="Include globs (at least one)")
    excludes: list[str] = Field(default_factory=list, description="Exclude globs (win over includes)")
    order: list[str] = Field(default_factory=list, description="Upload priority globs, highest first")
    cache_control: list[CacheControlRule] = Field(
        default_factory=list, description="Cache-Control rules, first match wins"
    )
    force_upload: bool = Field(default=False, description="Upload files even when unchanged")
    delete_orphaned: bool = Field(default=False, description="Delete remote objects without local file")
    wait_before_delete: int = Field(default=0, ge=0, description="Pause before deleting (milliseconds)")
    dry_run: bool = Field(default=False, description="Classify and log without changing the bucket")
    concurrency: int = Field(default=5, ge=1, description="Maximum parallel uploads")
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=MIN_CHUNK_SIZE,
        description="Multipart part size in bytes, also used for fingerprints",
    )

    @field_validator("source_dir")
    @classmethod
    def expand_source_dir(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())

    @field_validator("includes", "excludes", mode="before")
    @classmethod
    def split_lines(cls, v: Any) -> Any:
        """Accept a multi-line string as a list of globs."""
        if isinstance(v, str):
            return [line.strip() for line in v.splitlines() if line.strip()]
        return v

    @field_validator("order", mode="before")
    @classmethod
    def split_order(cls, v: Any) -> Any:
        """Accept a comma-separated string; drop empty entries."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [glob.strip() for glob in v if glob and glob.strip()]

    @field_validator("cache_control", mode="before")
    @classmethod
    def parse_cache_control(cls, v: Any) -> Any:
        """Accept ``glob=value`` strings next to mappings."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [line for line in v.splitlines() if line.strip()]
        return [CacheControlRule.parse(item) if isinstance(item, str) else item for item in v]


class AwsConfig(BaseModel):
    """Connection settings for the S3 client."""

    profile: str | None = Field(default=None, description="AWS profile name")
    region: str | None = Field(default=None, description="AWS region")
    endpoint_url: str | None = Field(default=None, description="Endpoint of an S3-compatible service")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable debug output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_file: str | None = Field(default=None, description="Path to log file")

    @field_validator("log_file")
    @classmethod
    def expand_optional_path(cls, v: str | None) -> str | None:
        """Expand ~ in optional path."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class BucketSyncConfig(BaseModel):
    """Root configuration model for BucketSync."""

    sync: SyncSettings = Field(description="Sync settings")
    aws: AwsConfig = Field(default_factory=AwsConfig, description="S3 connection settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
