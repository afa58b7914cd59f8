"""Tests for the public page assemblers and booking requests."""

from __future__ import annotations

from datetime import date

import pytest

from yachtme.catalog import (
    DEFAULT_IMAGES,
    BookingRequest,
    BookingRequestRejected,
    CatalogPages,
    NotFoundPage,
    PageState,
    filter_by_field,
    submit_booking_request,
)
from yachtme.catalog.pages import BoatDetailPage
from yachtme.models.booking import BookingStatus
from yachtme.models.site_setting import Theme


@pytest.fixture
def pages(seeded_gateway, messages):
    return CatalogPages(seeded_gateway, messages)


@pytest.mark.unit
class TestFilters:
    def test_all_returns_everything(self):
        items = [type("X", (), {"type": "dinghy"})(), type("X", (), {"type": "jetski"})()]
        assert filter_by_field(items, "type", "all") == items

    def test_filter_then_all_restores_list(self):
        items = [type("X", (), {"type": "dinghy"})(), type("X", (), {"type": "jetski"})()]
        assert len(filter_by_field(items, "type", "dinghy")) == 1
        assert filter_by_field(items, "type", "all") == items


@pytest.mark.unit
class TestHomeAndFleet:
    @pytest.mark.asyncio
    async def test_home_uses_setting_and_featured(self, pages):
        page = await pages.home("it")
        assert page.hero_image == "https://cdn.test/hero.jpg"
        assert page.about_image == DEFAULT_IMAGES["about"]
        assert [b.slug for b in page.featured_boats] == ["azimut-68"]
        assert page.state == PageState.READY

    @pytest.mark.asyncio
    async def test_home_degrades_on_fetch_failure(self, seeded_gateway, messages):
        seeded_gateway.fail_on = {"list_boats", "get_setting"}
        page = await CatalogPages(seeded_gateway, messages).home("it")
        assert page.hero_image == DEFAULT_IMAGES["home"]
        assert page.featured_boats == []
        assert page.state == PageState.EMPTY

    @pytest.mark.asyncio
    async def test_fleet_filter_by_type(self, pages):
        page = await pages.fleet("en", "dinghy")
        assert [b.slug for b in page.boats] == ["gommone-joker"]
        assert page.active_filter == "dinghy"
        assert page.filters[0].label == "All"
        assert len(page.filters) == 5

    @pytest.mark.asyncio
    async def test_fleet_localized_names(self, pages):
        page = await pages.fleet("en")
        names = {b.slug: b.name for b in page.boats}
        assert names["azimut-68"] == "Azimut 68 Flybridge"
        assert names["gommone-joker"] == "Gommone Joker"

    @pytest.mark.asyncio
    async def test_boat_detail_feature_groups_and_prices(self, pages):
        page = await pages.boat_detail("it", "azimut-68")
        assert isinstance(page, BoatDetailPage)
        assert page.price_full_day_text == "1.200 €"
        groups = {g.key: g.enabled for g in page.feature_groups}
        assert groups == {"comfort": ["Aria Condizionata", "WiFi"]}

    @pytest.mark.asyncio
    async def test_boat_detail_price_on_request(self, pages):
        page = await pages.boat_detail("en", "gommone-joker")
        assert page.price_full_day_text == "On request"

    @pytest.mark.asyncio
    async def test_unknown_boat_is_not_found(self, pages):
        page = await pages.boat_detail("en", "missing")
        assert isinstance(page, NotFoundPage)
        assert page.message == "Boat not found"
        assert page.back_href == "/en/fleet"

    @pytest.mark.asyncio
    async def test_default_locale_links_have_no_prefix(self, pages):
        page = await pages.boat_detail("it", "missing")
        assert page.back_href == "/fleet"


@pytest.mark.unit
class TestContentPages:
    @pytest.mark.asyncio
    async def test_services_only_active(self, pages):
        page = await pages.services("en")
        assert [s.slug for s in page.services] == ["skipper"]
        assert page.services[0].features == ["Experience"]
        assert page.hero_image == DEFAULT_IMAGES["services"]

    @pytest.mark.asyncio
    async def test_blog_category_filter(self, pages):
        page = await pages.blog("it", "news")
        assert [a.slug for a in page.articles] == ["novita-2025"]

    @pytest.mark.asyncio
    async def test_blog_empty_category(self, pages):
        page = await pages.blog("it", "info")
        assert page.articles == []
        assert page.state == PageState.EMPTY

    @pytest.mark.asyncio
    async def test_escursioni_only_excursions(self, pages):
        page = await pages.escursioni("it")
        assert [a.slug for a in page.articles] == ["calette-gabicce"]
        assert page.hero_image == DEFAULT_IMAGES["escursioni"]

    @pytest.mark.asyncio
    async def test_article_detail_related_and_phone(self, pages):
        page = await pages.article_detail("it", "calette-gabicce")
        assert page.article.title == "Le calette di Gabicce"
        assert [a.slug for a in page.related] == ["novita-2025"]
        assert page.contact_phone == "+39 333 1234567"

    @pytest.mark.asyncio
    async def test_draft_article_not_found(self, pages):
        page = await pages.article_detail("it", "bozza")
        assert isinstance(page, NotFoundPage)
        assert page.back_href == "/blog"

    @pytest.mark.asyncio
    async def test_contact_splits_address(self, pages):
        page = await pages.contact("it")
        assert page.address_lines == ["Porto Canale", "47921 Rimini", "Italia"]
        assert page.phones == ["+39 333 1234567"]

    def test_legal_page(self, pages):
        page = pages.legal("en", "privacy")
        assert page.title
        assert page.sections

    def test_unknown_legal_page(self, pages):
        assert pages.legal("it", "imprint") is None

    @pytest.mark.asyncio
    async def test_chrome(self, pages):
        chrome = await pages.chrome("en")
        assert chrome.site_name == "YACHT~ME"
        assert chrome.theme == Theme.GOLD
        assert chrome.nav[0].href == "/en"
        assert chrome.nav[1].label == "Fleet"

    @pytest.mark.asyncio
    async def test_chrome_unknown_theme_falls_back(self, seeded_gateway, messages):
        seeded_gateway.settings["site_theme"] = "purple"
        chrome = await CatalogPages(seeded_gateway, messages).chrome("it")
        assert chrome.theme == Theme.NAVY


@pytest.mark.unit
class TestBookingRequests:
    @pytest.mark.asyncio
    async def test_creates_pending_with_total(self, seeded_gateway, messages):
        result = await submit_booking_request(
            seeded_gateway,
            messages,
            "it",
            "azimut-68",
            BookingRequest(
                customer_name="Luca",
                customer_email="luca@example.com",
                start_date=date(2025, 8, 1),
                end_date=date(2025, 8, 3),
            ),
        )
        assert result.total_price == 3600
        stored = await seeded_gateway.get_booking(result.booking_id)
        assert stored.status == BookingStatus.PENDING

    @pytest.mark.asyncio
    async def test_price_on_request_has_no_total(self, seeded_gateway, messages):
        result = await submit_booking_request(
            seeded_gateway,
            messages,
            "en",
            "gommone-joker",
            BookingRequest(
                customer_name="Luca",
                customer_email="luca@example.com",
                start_date=date(2025, 8, 1),
                end_date=date(2025, 8, 1),
            ),
        )
        assert result.total_price is None

    @pytest.mark.asyncio
    async def test_unknown_boat_returns_none(self, seeded_gateway, messages):
        result = await submit_booking_request(
            seeded_gateway,
            messages,
            "it",
            "missing",
            BookingRequest(
                customer_name="Luca",
                customer_email="luca@example.com",
                start_date=date(2025, 8, 1),
                end_date=date(2025, 8, 1),
            ),
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_missing_fields_rejected_before_gateway(self, seeded_gateway, messages):
        seeded_gateway.calls.clear()
        with pytest.raises(BookingRequestRejected):
            await submit_booking_request(
                seeded_gateway, messages, "it", "azimut-68", BookingRequest(customer_name="Luca")
            )
        assert seeded_gateway.calls == []

    @pytest.mark.asyncio
    async def test_inverted_dates_rejected(self, seeded_gateway, messages):
        with pytest.raises(BookingRequestRejected):
            await submit_booking_request(
                seeded_gateway,
                messages,
                "it",
                "azimut-68",
                BookingRequest(
                    customer_name="Luca",
                    customer_email="luca@example.com",
                    start_date=date(2025, 8, 3),
                    end_date=date(2025, 8, 1),
                ),
            )
