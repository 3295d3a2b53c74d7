"""Ranked shortlist selection."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Literal, TypeVar


T = TypeVar("T")
SortDirection = Literal["asc", "desc"]


def select_top(
    items: Iterable[T],
    key: Callable[[T], Any],
    *,
    direction: SortDirection = "desc",
    limit: int = 3,
) -> list[T]:
    """Return the first `limit` items ordered by `key`.

    The sort is stable in both directions: items with equal keys keep their
    input order, so the earliest of several equal entries surfaces first.
    """

    if direction not in ("asc", "desc"):
        raise ValueError(f"unsupported sort direction: {direction}")
    ordered = sorted(items, key=key, reverse=direction == "desc")
    return ordered[: max(limit, 0)]
