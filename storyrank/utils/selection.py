"""
Deterministic ordering: score desc with item id as the total-order tie-break.

top_k uses a bounded heap so only k entries are kept for large pools.
"""

import heapq
from typing import Callable, Iterable, List, Tuple, TypeVar

T = TypeVar("T")


def rank_key(score: float, item_id: str) -> Tuple[float, str]:
    """Sort key: higher score first, then item id ascending."""
    return (-score, item_id)


def sort_ranked(entries: Iterable[T], key: Callable[[T], Tuple]) -> List[T]:
    """Full deterministic sort."""
    return sorted(entries, key=key)


def top_k(entries: Iterable[T], k: int, key: Callable[[T], Tuple]) -> List[T]:
    """The k smallest entries by key, in order (bounded heap)."""
    if k <= 0:
        return []
    return heapq.nsmallest(k, entries, key=key)
