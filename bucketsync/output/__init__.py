# BucketSync Output Module
# Rich console output

from bucketsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
