"""Client-side style filters over already-fetched lists."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Optional, TypeVar

T = TypeVar("T")

ALL = "all"


def _value(v: Any) -> Any:
    return v.value if isinstance(v, Enum) else v


def filter_by_field(items: Iterable[T], field: str, selected: Optional[str]) -> List[T]:
    """Keep items whose ``field`` equals ``selected``; ``'all'`` or None keeps everything.

    The input is never mutated, so applying a filter and then ``'all'`` to the
    original list gives the original back.
    """
    items = list(items)
    if selected is None or selected == ALL:
        return items
    return [item for item in items if _value(getattr(item, field, None)) == selected]


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test; an empty needle always matches."""
    if not needle:
        return True
    return needle.lower() in (haystack or "").lower()
