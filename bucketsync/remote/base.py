# BucketSync Remote Store Interface
# Operations the sync core needs from an object store

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from bucketsync.sync.item import RemoteObject

# Largest number of keys accepted by one delete request.
MAX_DELETE_BATCH = 1000


@dataclass
class DeleteOutcome:
    """Result of one batched delete request."""

    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class RemoteStore(ABC):
    """
    Object store holding the synchronized tree.

    Keys passed in and returned are relative to ``prefix``; implementations
    prepend and strip it.
    """

    max_delete_batch: int = MAX_DELETE_BATCH

    def __init__(self, bucket: str, prefix: str = ""):
        self.bucket = bucket
        self.prefix = prefix

    def full_key(self, key: str) -> str:
        """Absolute object key for a relative key."""
        return f"{self.prefix}{key}"

    def relative_key(self, full_key: str) -> str:
        """Relative key for an absolute object key."""
        if self.prefix and full_key.startswith(self.prefix):
            return full_key[len(self.prefix) :]
        return full_key

    def describe(self, key: str) -> str:
        """URL-style name of an object, for log lines."""
        return f"s3://{self.bucket}/{self.full_key(key)}"

    @abstractmethod
    def list_objects(self) -> Iterator[RemoteObject]:
        """
        List every object under the prefix.

        Raises:
            ListingError: If the store cannot be listed.
        """

    @abstractmethod
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
        """
        Store one object, as a multipart upload of chunk_size parts when
        size is at least chunk_size.

        ``size`` is the byte count of ``body`` taken from the local scan;
        implementations use it to plan the transfer and may ignore it.
        """

    @abstractmethod
    def delete_objects(self, keys: Sequence[str]) -> DeleteOutcome:
        """Delete at most ``max_delete_batch`` keys in one request."""
