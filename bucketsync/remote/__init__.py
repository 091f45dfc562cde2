# BucketSync Remote Module
# Object store interface and the S3 implementation

from bucketsync.remote.base import MAX_DELETE_BATCH, DeleteOutcome, RemoteStore
from bucketsync.remote.s3 import S3Store, create_s3_client

__all__ = [
    "MAX_DELETE_BATCH",
    "DeleteOutcome",
    "RemoteStore",
    "S3Store",
    "create_s3_client",
]
