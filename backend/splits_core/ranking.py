from __future__ import annotations

import math
from typing import Any, Callable, List, Sequence, TypeVar

T = TypeVar("T")


def _sort_key(value: Any) -> float:
    # Unset or zero values never lead a ranking.
    if not value:
        return math.inf
    return value


def rank(items: Sequence[T], key: Callable[[T], Any]) -> List[int]:
    """Indices of ``items`` ordered best-first by ``key``.

    The sort is stable, so equal values keep their input order.
    """
    return sorted(range(len(items)), key=lambda idx: _sort_key(key(items[idx])))


def ranked_items(items: Sequence[T], key: Callable[[T], Any]) -> List[T]:
    return [items[idx] for idx in rank(items, key)]


def position_of(item: Any, ranked: Sequence[Any], id_key: Callable[[Any], Any]) -> int:
    """1-based place of ``item`` in ``ranked``, matched by identity key; 0 if absent."""
    target = id_key(item)
    for place, candidate in enumerate(ranked, start=1):
        if id_key(candidate) == target:
            return place
    return 0


def best_value(ranked: Sequence[T], key: Callable[[T], Any]) -> float:
    if not ranked:
        return 0.0
    return key(ranked[0]) or 0.0
