"""Click-based CLI for BucketSync - local directory to S3 bucket sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import click
from botocore.exceptions import BotoCoreError
from pydantic import ValidationError
from rich.markup import escape

from bucketsync import __version__
from bucketsync.config import (
    BucketSyncConfig,
    build_config,
    ensure_config_exists,
    format_validation_error,
    get_config_path,
    load_config,
    validate_config_file,
)
from bucketsync.errors import SyncError
from bucketsync.logger import setup_logging
from bucketsync.output import create_console
from bucketsync.remote import S3Store, create_s3_client
from bucketsync.sync import SyncEngine

console = create_console()


def _collect_overrides(
    *,
    bucket: Optional[str] = None,
    prefix: Optional[str] = None,
    source_dir: Optional[Path] = None,
    includes: tuple[str, ...] = (),
    excludes: tuple[str, ...] = (),
    order: Optional[str] = None,
    cache_control: tuple[str, ...] = (),
    force_upload: Optional[bool] = None,
    delete_orphaned: Optional[bool] = None,
    wait_before_delete: Optional[int] = None,
    concurrency: Optional[int] = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> dict[str, dict[str, Any]]:
    """Turn the command-line options that were given into config overrides."""
    sync: dict[str, Any] = {}
    if bucket is not None:
        sync["bucket"] = bucket
    if prefix is not None:
        sync["prefix"] = prefix
    if source_dir is not None:
        sync["source_dir"] = str(source_dir)
    if includes:
        sync["includes"] = list(includes)
    if excludes:
        sync["excludes"] = list(excludes)
    if order is not None:
        sync["order"] = order
    if cache_control:
        sync["cache_control"] = list(cache_control)
    if force_upload is not None:
        sync["force_upload"] = force_upload
    if delete_orphaned is not None:
        sync["delete_orphaned"] = delete_orphaned
    if wait_before_delete is not None:
        sync["wait_before_delete"] = wait_before_delete
    if concurrency is not None:
        sync["concurrency"] = concurrency
    if dry_run:
        sync["dry_run"] = True

    overrides: dict[str, dict[str, Any]] = {"sync": sync}
    if verbose:
        overrides["output"] = {"verbose": True}
    return overrides


def _load_or_exit(config_path: Optional[Path], overrides: dict[str, dict[str, Any]]) -> BucketSyncConfig:
    """Load configuration, exiting with status 1 on any problem."""
    try:
        if config_path is None and not get_config_path().exists() and {"bucket", "source_dir"} <= overrides["sync"].keys():
            # Everything needed was given on the command line
            return build_config({}, overrides)
        return load_config(config_path, overrides)
    except FileNotFoundError as e:
        console.print_error(str(e))
        sys.exit(1)
    except ValidationError as e:
        console.print_error("Invalid configuration:")
        for error in e.errors():
            console.print(f"  [red]•[/red] {escape(format_validation_error(error))}")
        sys.exit(1)


def _create_engine(config: BucketSyncConfig) -> SyncEngine:
    setup_logging(
        verbose=config.output.verbose,
        colored=config.output.colored,
        log_file=config.output.log_file,
    )
    try:
        client = create_s3_client(
            profile=config.aws.profile,
            region=config.aws.region,
            endpoint_url=config.aws.endpoint_url,
        )
    except BotoCoreError as e:
        console.print_error(f"Cannot create S3 client: {escape(str(e))}")
        sys.exit(1)
    store = S3Store(config.sync.bucket, config.sync.prefix, client=client)
    return SyncEngine(config.sync, store)


_common_options = [
    click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Configuration file (default: ./bucketsync.yaml or $BUCKETSYNC_CONFIG)",
    ),
    click.option("--bucket", "-b", help="Target bucket"),
    click.option("--prefix", "-p", help="Key prefix, prepended verbatim (e.g. 'www/')"),
    click.option(
        "--dir",
        "-d",
        "source_dir",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        help="Local directory to sync",
    ),
    click.option("--include", "-i", "includes", multiple=True, help="Include glob (repeatable)"),
    click.option("--exclude", "-e", "excludes", multiple=True, help="Exclude glob (repeatable)"),
    click.option("--order", help="Comma-separated upload priority globs, e.g. '*.css,*.js'"),
    click.option("--cache-control", "cache_control", multiple=True, help="Rule 'glob=value' (repeatable)"),
    click.option("--force-upload/--no-force-upload", default=None, help="Upload files even when unchanged"),
    click.option(
        "--delete-orphaned/--no-delete-orphaned",
        default=None,
        help="Delete remote objects that have no local file",
    ),
    click.option("--verbose", "-v", is_flag=True, help="Show per-file decisions"),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="bucketsync")
def cli() -> None:
    """BucketSync - synchronize a local directory to an S3 bucket.

    Uploads new and changed files, optionally deletes objects that no
    longer exist locally, and previews everything with --dry-run.

    \b
    Workflows:
      bucketsync config init          Create ./bucketsync.yaml
      bucketsync plan                 Show what would change
      bucketsync sync --dry-run       Full run without changing the bucket
      bucketsync sync                 Upload, then delete orphans
    """
    pass


@cli.command()
@common_options
@click.option("--wait-before-delete", type=click.IntRange(min=0), help="Pause before deleting (milliseconds)")
@click.option("--concurrency", type=click.IntRange(min=1), help="Maximum parallel uploads")
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
def sync(
    config_path: Optional[Path],
    bucket: Optional[str],
    prefix: Optional[str],
    source_dir: Optional[Path],
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    order: Optional[str],
    cache_control: tuple[str, ...],
    force_upload: Optional[bool],
    delete_orphaned: Optional[bool],
    verbose: bool,
    wait_before_delete: Optional[int],
    concurrency: Optional[int],
    dry_run: bool,
) -> None:
    """Synchronize the local directory to the bucket.

    Uploads new files, then modified files, then deletes orphaned
    objects when enabled. Nothing is deleted if an upload failed.

    \b
    Examples:
      bucketsync sync -b my-site -d ./public -i '**' --dry-run
      bucketsync sync --delete-orphaned --wait-before-delete 30000
    """
    overrides = _collect_overrides(
        bucket=bucket,
        prefix=prefix,
        source_dir=source_dir,
        includes=includes,
        excludes=excludes,
        order=order,
        cache_control=cache_control,
        force_upload=force_upload,
        delete_orphaned=delete_orphaned,
        wait_before_delete=wait_before_delete,
        concurrency=concurrency,
        dry_run=dry_run,
        verbose=verbose,
    )
    config = _load_or_exit(config_path, overrides)
    engine = _create_engine(config)

    result = engine.sync()

    if result.plan is not None:
        console.verbose = config.output.verbose
        console.print_plan(result.plan, cache_control=config.sync.cache_control, dry_run=result.dry_run)
    console.print_sync_result(result)

    if not result.success:
        sys.exit(1)


@cli.command()
@common_options
def plan(
    config_path: Optional[Path],
    bucket: Optional[str],
    prefix: Optional[str],
    source_dir: Optional[Path],
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    order: Optional[str],
    cache_control: tuple[str, ...],
    force_upload: Optional[bool],
    delete_orphaned: Optional[bool],
    verbose: bool,
) -> None:
    """Show what a sync would upload and delete.

    Lists both sides and classifies every file; never changes the bucket.
    """
    overrides = _collect_overrides(
        bucket=bucket,
        prefix=prefix,
        source_dir=source_dir,
        includes=includes,
        excludes=excludes,
        order=order,
        cache_control=cache_control,
        force_upload=force_upload,
        delete_orphaned=delete_orphaned,
        verbose=verbose,
    )
    config = _load_or_exit(config_path, overrides)
    engine = _create_engine(config)

    try:
        diff_result = engine.plan()
    except SyncError as e:
        console.print_error(str(e))
        sys.exit(1)

    console.verbose = config.output.verbose
    console.print_plan(diff_result, cache_control=config.sync.cache_control, dry_run=True)
    console.print(
        f"{len(diff_result.new)} new, {len(diff_result.modified)} modified, "
        f"{len(diff_result.orphaned)} orphaned, {len(diff_result.unchanged)} unchanged"
    )


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration management.

    \b
    The configuration file is ./bucketsync.yaml unless BUCKETSYNC_CONFIG
    points elsewhere. Main keys:
      sync.bucket, sync.prefix, sync.source_dir
      sync.includes, sync.excludes, sync.order, sync.cache_control
      sync.delete_orphaned, sync.wait_before_delete
      aws.profile, aws.region, aws.endpoint_url
    """
    pass


@config.command("init")
def config_init() -> None:
    """Create a default configuration file."""
    config_path, created = ensure_config_exists()
    if created:
        console.print_success(f"Created configuration: {config_path}")
    else:
        console.print_warning(f"Configuration already exists: {config_path}")


@config.command("show")
def config_show() -> None:
    """Print the configuration file."""
    config_path = get_config_path()
    if not config_path.exists():
        console.print_warning(f"Configuration file not found: {config_path}")
        return
    console.print(config_path.read_text(encoding="utf-8"), markup=False)


@config.command("validate")
@click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to validate (default: active configuration)",
)
def config_validate(file: Optional[Path]) -> None:
    """Validate a configuration file."""
    is_valid, errors = validate_config_file(file)
    if is_valid:
        console.print_success("Configuration is valid")
        return

    console.print_error(f"Configuration has {len(errors)} errors:")
    for error in errors:
        console.print(f"  [red]•[/red] {escape(error)}")
    sys.exit(1)
