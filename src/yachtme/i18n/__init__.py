"""Locale resolution and the message catalog.

Messages live in ``messages/<locale>.json`` as nested objects addressed with
dotted keys (``"nav.fleet"``). Lookups fall back to the default locale, then
to the key itself.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

MESSAGES_DIR = Path(__file__).parent / "messages"


def resolve_locale(segment: Optional[str], supported: List[str], default: str) -> str:
    """Pick the locale named by a URL segment, or the default if unrecognized."""
    if segment:
        candidate = segment.strip().lower()
        if candidate in supported:
            return candidate
    return default


@lru_cache(maxsize=8)
def load_messages(locale: str) -> Dict[str, Any]:
    """Load and cache the message dictionary of one locale."""
    path = MESSAGES_DIR / f"{locale}.json"
    if not path.exists():
        logger.warning("No message catalog for locale %s", locale)
        return {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class MessageCatalog:
    """Locale-keyed message lookup with default-locale fallback."""

    def __init__(self, supported: List[str], default: str = "it"):
        self.supported = supported
        self.default = default

    def resolve(self, segment: Optional[str]) -> str:
        return resolve_locale(segment, self.supported, self.default)

    def _lookup(self, locale: str, key: str) -> Any:
        node: Any = load_messages(locale)
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def get(self, locale: str, key: str) -> Any:
        """Raw value (string, list or object) for a dotted key."""
        value = self._lookup(locale, key)
        if value is None and locale != self.default:
            value = self._lookup(self.default, key)
        return value

    def t(self, locale: str, key: str, **params: Any) -> str:
        """Translate a dotted key, interpolating ``{name}`` placeholders."""
        value = self.get(locale, key)
        if not isinstance(value, str):
            logger.debug("Missing message %s for locale %s", key, locale)
            return key
        return value.format(**params) if params else value
