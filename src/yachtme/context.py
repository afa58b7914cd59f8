"""Explicit application contexts for the site theme and cookie consent.

Both have a defined lifecycle: initialized from persisted storage, changed
through a single setter, and reset to their defaults.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, ValidationError, field_validator

from .models.site_setting import DEFAULT_THEME, SITE_THEME, Theme
from .storage.base import CatalogGateway

logger = logging.getLogger(__name__)

CONSENT_COOKIE = "yacht-me-cookie-consent"
CONSENT_VERSION = "1.0"
CONSENT_MAX_AGE = 60 * 60 * 24 * 365


class ThemeContext:
    """Active colour theme, persisted in the ``site_theme`` setting."""

    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.theme: Theme = DEFAULT_THEME
        self.is_loading = True

    async def load(self) -> Theme:
        """Read the stored theme; unknown or unreadable values keep the default."""
        try:
            saved = await self.gateway.get_setting(SITE_THEME)
            if saved in Theme._value2member_map_:
                self.theme = Theme(saved)
            elif saved:
                logger.warning("Ignoring unknown stored theme %r", saved)
        except Exception as e:
            logger.error("Error loading theme: %s", e)
        finally:
            self.is_loading = False
        return self.theme

    async def set_theme(self, theme: Theme) -> Theme:
        """Persist then apply a new theme. Gateway failures propagate."""
        await self.gateway.update_setting(SITE_THEME, theme.value)
        self.theme = theme
        return theme

    def reset(self) -> None:
        self.theme = DEFAULT_THEME
        self.is_loading = True


class CookieConsent(BaseModel):
    """Visitor consent per cookie category; ``necessary`` cannot be disabled."""

    necessary: bool = True
    analytics: bool = False
    marketing: bool = False
    maps: bool = False

    @field_validator("necessary", mode="after")
    @classmethod
    def _always_necessary(cls, v: bool) -> bool:
        return True

    @classmethod
    def accept_all(cls) -> "CookieConsent":
        return cls(analytics=True, marketing=True, maps=True)

    @classmethod
    def reject_all(cls) -> "CookieConsent":
        return cls()

    def with_preferences(self, **preferences: Any) -> "CookieConsent":
        data = self.model_dump()
        data.update({k: v for k, v in preferences.items() if v is not None})
        return CookieConsent(**data)


def parse_consent(raw: Optional[str]) -> Optional[CookieConsent]:
    """Decode the consent cookie; missing, malformed or other-version values mean no consent."""
    if not raw:
        return None
    try:
        stored = json.loads(unquote(raw))
    except ValueError:
        logger.debug("Malformed consent cookie")
        return None
    if not isinstance(stored, dict) or stored.get("version") != CONSENT_VERSION:
        return None
    try:
        return CookieConsent.model_validate(stored.get("consent") or {})
    except ValidationError:
        return None


def serialize_consent(consent: CookieConsent, now: Optional[datetime] = None) -> str:
    payload: Dict[str, Any] = {
        "version": CONSENT_VERSION,
        "consent": consent.model_dump(),
        "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
    }
    return quote(json.dumps(payload, separators=(",", ":")))


class ConsentState(BaseModel):
    """What the cookie banner needs to know."""

    consent: Optional[CookieConsent] = None
    has_consented: bool = False
    show_banner: bool = True

    @classmethod
    def from_cookie(cls, raw: Optional[str]) -> "ConsentState":
        consent = parse_consent(raw)
        return cls(consent=consent, has_consented=consent is not None, show_banner=consent is None)
