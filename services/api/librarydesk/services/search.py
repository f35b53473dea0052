from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")


def matches_term(term: str, fields: Iterable[str | None]) -> bool:
    """Case-insensitive substring match of `term` against any non-empty field.

    The term is used as typed; whitespace is part of the needle.
    """
    needle = term.lower()
    if not needle:
        return True
    return any(needle in value.lower() for value in fields if value)


def filter_loaded(
    items: Sequence[T], term: str | None, *attrs: str
) -> list[T]:
    """Filter an already-loaded list in memory; never issues a query."""
    if not term:
        return list(items)
    return [
        item for item in items if matches_term(term, (getattr(item, a, None) for a in attrs))
    ]
