"""Pytest configuration and fixtures for yachtme tests."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from memory_gateway import MemoryGateway


@pytest.fixture
def mock_settings():
    """Mock settings for testing without requiring environment variables."""
    settings = MagicMock()
    settings.supabase_url = "https://project.supabase.co"
    settings.supabase_key = "service-key"
    settings.supabase_jwt_secret = "test-secret-with-at-least-32-bytes!!"
    settings.storage_bucket = "boat-images"
    settings.chat_webhook_url = "https://automation.test/webhook/chat"
    settings.chat_timeout_seconds = 5.0
    settings.admin_email_list = ["owner@yachtme.it"]
    settings.default_locale = "it"
    settings.locale_list = ["it", "en"]
    return settings


@pytest.fixture
def settings():
    """Real Settings instance isolated from the environment and .env file."""
    from yachtme.config import Settings

    return Settings(
        _env_file=None,
        SUPABASE_URL="https://project.supabase.co",
        SUPABASE_KEY="service-key",
        SUPABASE_JWT_SECRET="test-secret-with-at-least-32-bytes!!",
        ADMIN_EMAILS="owner@yachtme.it",
        CHAT_WEBHOOK_URL="https://automation.test/webhook/chat",
    )


@pytest.fixture
def gateway():
    """Empty in-memory gateway."""
    return MemoryGateway()


@pytest.fixture
def messages():
    from yachtme.i18n import MessageCatalog

    return MessageCatalog(["it", "en"], "it")


@pytest.fixture
def seeded_gateway(gateway):
    """Gateway with a small fleet, bookings, articles, services and settings."""
    yacht = gateway.add_boat(
        name="Azimut 68",
        name_en="Azimut 68 Flybridge",
        slug="azimut-68",
        type="motor_yacht_20m",
        description="Yacht di lusso",
        description_en="Luxury yacht",
        price_full_day=1200,
        price_half_day=700,
        capacity=12,
        is_featured=True,
        features={"air_conditioning": True, "wifi": True, "cabins": 3},
    )
    dinghy = gateway.add_boat(
        name="Gommone Joker",
        slug="gommone-joker",
        type="dinghy",
        price_full_day=None,
        capacity=6,
    )
    gateway.add_booking(
        boat_id=yacht.id,
        customer_name="Mario Rossi",
        customer_email="mario@example.com",
        start_date=date(2025, 7, 10),
        end_date=date(2025, 7, 12),
        status="confirmed",
        total_price=3600,
    )
    gateway.add_booking(
        boat_id=dinghy.id,
        customer_name="Anna Bianchi",
        customer_email="anna@example.com",
        start_date=date(2025, 7, 11),
        end_date=date(2025, 7, 11),
        status="pending",
    )
    gateway.add_article(
        title="Le calette di Gabicce",
        title_en="The coves of Gabicce",
        slug="calette-gabicce",
        content="Testo",
        content_en="Text",
        category="escursioni",
        status="published",
        published_at="2025-05-01T10:00:00+00:00",
    )
    gateway.add_article(
        title="Novità 2025",
        slug="novita-2025",
        content="Testo",
        category="news",
        status="published",
        published_at="2025-06-01T10:00:00+00:00",
    )
    gateway.add_article(
        title="Bozza",
        slug="bozza",
        content="Da finire",
        category="blog",
        status="draft",
    )
    gateway.add_service(
        name="Skipper",
        name_en="Skipper",
        slug="skipper",
        features=["Esperienza", "Patente nautica"],
        features_en=["Experience"],
        icon="User",
        display_order=1,
    )
    gateway.add_service(name="Catering", slug="catering", display_order=2, is_active=False)
    gateway.settings.update(
        {
            "site_name": "YACHT~ME",
            "contact_phone": "+39 333 1234567",
            "contact_address": "Porto Canale, 47921 Rimini, Italia",
            "hero_image": "https://cdn.test/hero.jpg",
            "site_theme": "gold",
        }
    )
    return gateway
