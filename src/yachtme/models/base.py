"""Shared helpers for bilingual entities and timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

# Locales that have dedicated *_en columns; everything else reads the Italian value.
TRANSLATED_LOCALES = {"en"}


def pick_localized(italian: Any, english: Any, locale: str) -> Any:
    """Return the English value for translated locales when it is non-empty."""
    if locale in TRANSLATED_LOCALES and english:
        return english
    return italian


def pick_localized_list(italian: List[str], english: Optional[List[str]], locale: str) -> List[str]:
    """List variant of pick_localized; an empty English list falls back too."""
    if locale in TRANSLATED_LOCALES and english:
        return list(english)
    return list(italian)


def utcnow() -> datetime:
    """Timezone-aware default for created_at and updated_at."""
    return datetime.now(timezone.utc)
