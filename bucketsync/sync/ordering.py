# BucketSync Upload Ordering
# Priority sort of upload batches by glob position

from collections.abc import Callable, Sequence
from typing import TypeVar

from bucketsync.utils.patterns import first_match

T = TypeVar("T")


def sort_key(path: str, order_patterns: Sequence[str]) -> int:
    """
    Get the priority of a path.

    Args:
        path: Relative path.
        order_patterns: Ordered glob list, highest priority first.

    Returns:
        Index of the first matching pattern, or len(order_patterns) when
        nothing matches so unmatched files go last.
    """
    index = first_match(path, order_patterns)
    return len(order_patterns) if index is None else index


def sort_by_order(
    items: Sequence[T],
    order_patterns: Sequence[str],
    *,
    path_of: Callable[[T], str] = lambda item: item.path,  # type: ignore[attr-defined]
) -> list[T]:
    """
    Stable-sort items by ``sort_key``.

    Items with equal priority keep their original relative order.
    """
    if not order_patterns:
        return list(items)
    return sorted(items, key=lambda item: sort_key(path_of(item), order_patterns))
