# BucketSync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

from bucketsync.utils.hashing import DEFAULT_CHUNK_SIZE

DEFAULT_CONFIG: dict[str, Any] = {
    "sync": {
        "bucket": "my-bucket",
        "prefix": "",
        "source_dir": "./public",
        "includes": ["**"],
        "excludes": [
            # System files
            ".DS_Store",
            "Thumbs.db",
            "*.swp",
            "*~",
            ".git/**",
            # Secrets
            ".env",
            ".env.*",
            "*.pem",
            "*.key",
        ],
        "order": [],
        "cache_control": [],
        "force_upload": False,
        "delete_orphaned": False,
        "wait_before_delete": 0,
        "dry_run": False,
        "concurrency": 5,
        "chunk_size": DEFAULT_CHUNK_SIZE,
    },
    "aws": {
        "profile": None,
        "region": None,
        "endpoint_url": None,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "log_file": None,
    },
}


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# BucketSync Configuration
#
# Synchronizes a local directory to an S3 bucket.
#
# sync:
#   includes / excludes: globs; excludes win over includes
#   order:               upload priority globs, e.g. ["*.css", "*.js"]
#   cache_control:       "glob=value" rules, first match wins
#   delete_orphaned:     delete objects that have no local file
#   wait_before_delete:  pause in milliseconds before deleting
#   chunk_size:          multipart part size (>= 5 MiB); changing it makes
#                        every large file look modified once

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
