# BucketSync Configuration Module
# YAML configuration: schema, loading and defaults

from bucketsync.config.defaults import DEFAULT_CONFIG, generate_default_config, get_default_config
from bucketsync.config.loader import (
    build_config,
    ensure_config_exists,
    format_validation_error,
    get_config_path,
    load_config,
    validate_config_file,
)
from bucketsync.config.schema import (
    AwsConfig,
    BucketSyncConfig,
    CacheControlRule,
    OutputConfig,
    SyncSettings,
)

__all__ = [
    # Schema
    "BucketSyncConfig",
    "SyncSettings",
    "CacheControlRule",
    "AwsConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "build_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    "format_validation_error",
    # Defaults
    "DEFAULT_CONFIG",
    "get_default_config",
    "generate_default_config",
]
