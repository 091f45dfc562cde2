# BucketSync Configuration Loader
# Read, merge, write and check bucketsync.yaml

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from bucketsync.config.defaults import generate_default_config, get_default_config
from bucketsync.config.schema import BucketSyncConfig

CONFIG_FILE_NAME = "bucketsync.yaml"
CONFIG_ENV_VAR = "BUCKETSYNC_CONFIG"

SECTIONS = ("sync", "aws", "output")


def get_config_path() -> Path:
    """Location of the active configuration file.

    ``$BUCKETSYNC_CONFIG`` wins; otherwise ``bucketsync.yaml`` in the
    current directory.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / CONFIG_FILE_NAME


def _resolve(config_path: Optional[Path]) -> Path:
    return get_config_path() if config_path is None else config_path


def _read_yaml(config_path: Path) -> Any:
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_config(config_path: Optional[Path] = None, overrides: Optional[dict[str, Any]] = None) -> BucketSyncConfig:
    """
    Load and validate the configuration file.

    Args:
        config_path: File to read (active configuration if None).
        overrides: Per-section values applied on top of the file,
            e.g. ``{"sync": {"dry_run": True}}``.

    Returns:
        BucketSyncConfig: Validated configuration.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError: If the merged configuration is invalid.
    """
    config_path = _resolve(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\nRun 'bucketsync config init' to create one."
        )

    return build_config(_read_yaml(config_path) or {}, overrides)


def build_config(data: dict, overrides: Optional[dict[str, Any]] = None) -> BucketSyncConfig:
    """
    Validate configuration data merged with defaults and overrides.

    Args:
        data: Parsed configuration (may be empty).
        overrides: Per-section values that win over data.

    Raises:
        ValidationError: If the result is invalid.
    """
    merged = _merge_with_defaults(data)
    for section, values in (overrides or {}).items():
        merged[section] = {**merged.get(section, {}), **values}

    return BucketSyncConfig.model_validate(merged)


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Write the commented default configuration unless the file exists.

    Returns:
        ``(path, created)``.
    """
    config_path = _resolve(config_path)
    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Check a configuration file without using it.

    Args:
        config_path: File to check (active configuration if None).

    Returns:
        ``(ok, messages)``; messages name the offending key for schema errors.
    """
    config_path = _resolve(config_path)
    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        data = _read_yaml(config_path)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]
    if not isinstance(data, dict) or "sync" not in data:
        return False, ["Missing 'sync' section"]

    try:
        BucketSyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        return False, [format_validation_error(error) for error in e.errors()]

    return True, []


def format_validation_error(error: dict) -> str:
    """Render one pydantic error as ``section -> key: message``."""
    loc = " -> ".join(str(part) for part in error["loc"])
    return f"{loc}: {error['msg']}"


def _merge_with_defaults(data: dict) -> dict:
    result = get_default_config()
    # The target bucket must always be configured explicitly
    del result["sync"]["bucket"]

    for section in SECTIONS:
        if data.get(section):
            result[section].update(data[section])

    return result
