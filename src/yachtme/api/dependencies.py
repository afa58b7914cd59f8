"""FastAPI dependencies wiring the gateway, catalogs and HTTP client."""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Depends, Request

from ..catalog.pages import CatalogPages
from ..config import Settings, get_settings
from ..i18n import MessageCatalog
from ..storage.base import CatalogGateway
from ..storage.supabase_client import SupabaseGateway


@lru_cache
def get_gateway() -> CatalogGateway:
    """Process-wide Supabase gateway."""
    return SupabaseGateway()


def get_message_catalog(settings: Settings = Depends(get_settings)) -> MessageCatalog:
    return MessageCatalog(settings.locale_list, settings.default_locale)


def get_locale(locale: str, messages: MessageCatalog = Depends(get_message_catalog)) -> str:
    """Locale from the URL path segment, default locale when unrecognized."""
    return messages.resolve(locale)


def get_pages(
    gateway: CatalogGateway = Depends(get_gateway),
    messages: MessageCatalog = Depends(get_message_catalog),
) -> CatalogPages:
    return CatalogPages(gateway, messages)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound client created in the app lifespan."""
    return request.app.state.http_client
