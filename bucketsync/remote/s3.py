# BucketSync S3 Store
# boto3 implementation of the remote store

import logging
from collections.abc import Iterator, Sequence
from typing import Any, BinaryIO, Optional

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError

from bucketsync.errors import ListingError, SyncError
from bucketsync.remote.base import DeleteOutcome, RemoteStore
from bucketsync.sync.item import RemoteObject

logger = logging.getLogger(__name__)


def create_s3_client(
    profile: Optional[str] = None,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> Any:
    """
    Create an S3 client from an optional profile, region and endpoint.

    Args:
        profile: AWS profile name; default credential chain when None.
        region: AWS region.
        endpoint_url: Endpoint of an S3-compatible service.

    Returns:
        boto3 S3 client.
    """
    session = boto3.Session(profile_name=profile, region_name=region)
    client_args: dict[str, Any] = {}
    if endpoint_url:
        client_args["endpoint_url"] = endpoint_url
    return session.client("s3", **client_args)


def _describe_error(error: Exception) -> str:
    if isinstance(error, ClientError):
        info = error.response.get("Error", {})
        return f"{info.get('Code', 'Unknown')}: {info.get('Message', error)}"
    return str(error)


class S3Store(RemoteStore):
    """
    Remote store backed by an S3 bucket.

    Examples:
        >>> store = S3Store("my-site", prefix="www/")
        >>> inventory = list(store.list_objects())
    """

    def __init__(self, bucket: str, prefix: str = "", *, client: Any = None):
        """
        Initialize the store.

        Args:
            bucket: Bucket name.
            prefix: Raw key prefix, prepended without adding a separator.
            client: boto3 S3 client (created from the default session if None).
        """
        super().__init__(bucket, prefix)
        self.client = client if client is not None else create_s3_client()

    def list_objects(self) -> Iterator[RemoteObject]:
        params = {"Bucket": self.bucket}
        if self.prefix:
            params["Prefix"] = self.prefix

        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                status = page.get("ResponseMetadata", {}).get("HTTPStatusCode", 200)
                if status != 200:
                    raise ListingError(f"Listing s3://{self.bucket}/{self.prefix} returned HTTP {status}")

                for entry in page.get("Contents", []):
                    key = self.relative_key(entry["Key"])
                    if not key:
                        continue
                    yield RemoteObject(key=key, size=entry.get("Size", 0), etag=entry.get("ETag", ""))
        except (BotoCoreError, ClientError) as e:
            raise ListingError(f"Cannot list s3://{self.bucket}/{self.prefix}: {_describe_error(e)}") from e

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
        extra_args = {"ContentType": content_type}
        if cache_control:
            extra_args["CacheControl"] = cache_control

        # Part size must equal the fingerprint chunk size, or the ETag the
        # store computes will never match the local fingerprint.
        config = TransferConfig(
            multipart_threshold=chunk_size,
            multipart_chunksize=chunk_size,
            use_threads=False,
        )
        parts = (size + chunk_size - 1) // chunk_size if size >= chunk_size else 1
        logger.debug(f"Sending {size} bytes to {self.full_key(key)} in {parts} part(s)")

        try:
            self.client.upload_fileobj(
                body,
                self.bucket,
                self.full_key(key),
                ExtraArgs=extra_args,
                Config=config,
            )
        except (BotoCoreError, ClientError) as e:
            raise SyncError(f"Error uploading to {self.full_key(key)}: {_describe_error(e)}") from e

    def delete_objects(self, keys: Sequence[str]) -> DeleteOutcome:
        outcome = DeleteOutcome()
        if not keys:
            return outcome

        try:
            response = self.client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": self.full_key(key)} for key in keys], "Quiet": False},
            )
        except (BotoCoreError, ClientError) as e:
            reason = _describe_error(e)
            outcome.failed = {key: reason for key in keys}
            return outcome

        for entry in response.get("Deleted", []):
            outcome.deleted.append(self.relative_key(entry["Key"]))
        for entry in response.get("Errors", []):
            outcome.failed[self.relative_key(entry["Key"])] = f"{entry.get('Code', 'Unknown')}: {entry.get('Message', '')}"
        return outcome
