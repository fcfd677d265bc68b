from __future__ import annotations
from typing import Iterable, Sequence


def contains(items: Iterable[str], x: str) -> bool:
    """True if `x` is one of `items`."""
    return x in set(items)


def contains_any(items: Iterable[str], xs: Sequence[str]) -> bool:
    pool = set(items)
    return any(x in pool for x in xs)


def contains_all(items: Iterable[str], xs: Sequence[str]) -> bool:
    # an empty query matches nothing
    if not xs:
        return False
    pool = set(items)
    return all(x in pool for x in xs)


def key_path(*keys: str) -> str:
    """Store key path, e.g. key_path('/cluster', 'nodes', 'n1') -> '/cluster/nodes/n1'."""
    return "/".join(keys)
