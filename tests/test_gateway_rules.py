"""Tests for backend-independent gateway rules (overlap, publishing, localization)."""

from __future__ import annotations

from datetime import date

import pytest

from yachtme.models.article import ArticleFields, ArticleStatus
from yachtme.models.booking import BookingFields, BookingStatus
from yachtme.models.customer import CustomerFields, CustomerSource
from yachtme.storage.base import BookingConflictError


def _fields(boat_id, start, end, status=BookingStatus.CONFIRMED, name="Cliente"):
    return BookingFields(
        boat_id=boat_id,
        customer_name=name,
        customer_email=f"{name.lower()}@example.com",
        start_date=start,
        end_date=end,
        status=status,
    )


@pytest.mark.unit
class TestBookingOverlap:
    @pytest.fixture
    def boat(self, gateway):
        return gateway.add_boat(name="Azimut", slug="azimut")

    @pytest.mark.asyncio
    async def test_confirmed_overlap_refused(self, gateway, boat):
        await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))

        with pytest.raises(BookingConflictError):
            await gateway.create_booking(_fields(boat.id, date(2025, 7, 12), date(2025, 7, 13)))

    @pytest.mark.asyncio
    async def test_pending_may_overlap(self, gateway, boat):
        await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))
        pending = await gateway.create_booking(
            _fields(boat.id, date(2025, 7, 11), date(2025, 7, 11), BookingStatus.PENDING)
        )
        assert pending.status == BookingStatus.PENDING

    @pytest.mark.asyncio
    async def test_other_boat_not_affected(self, gateway, boat):
        other = gateway.add_boat(name="Joker", slug="joker")
        await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))
        booking = await gateway.create_booking(_fields(other.id, date(2025, 7, 10), date(2025, 7, 12)))
        assert booking.boat_id == other.id

    @pytest.mark.asyncio
    async def test_update_ignores_itself(self, gateway, boat):
        booking = await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))
        updated = await gateway.update_booking(
            booking.id, _fields(boat.id, date(2025, 7, 10), date(2025, 7, 14))
        )
        assert updated.end_date == date(2025, 7, 14)

    @pytest.mark.asyncio
    async def test_confirming_overlapping_pending_refused(self, gateway, boat):
        await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))
        pending = await gateway.create_booking(
            _fields(boat.id, date(2025, 7, 11), date(2025, 7, 11), BookingStatus.PENDING)
        )

        with pytest.raises(BookingConflictError):
            await gateway.update_booking_status(pending.id, BookingStatus.CONFIRMED)

    @pytest.mark.asyncio
    async def test_cancelled_bookings_do_not_block(self, gateway, boat):
        first = await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))
        await gateway.update_booking_status(first.id, BookingStatus.CANCELLED)

        second = await gateway.create_booking(_fields(boat.id, date(2025, 7, 10), date(2025, 7, 12)))
        assert second.status == BookingStatus.CONFIRMED


@pytest.mark.unit
class TestArticlePublishing:
    @pytest.mark.asyncio
    async def test_published_on_create_gets_date(self, gateway):
        article = await gateway.create_article(
            ArticleFields(title="Ciao", slug="ciao", content="x", status=ArticleStatus.PUBLISHED)
        )
        assert article.published_at is not None

    @pytest.mark.asyncio
    async def test_draft_has_no_date(self, gateway):
        article = await gateway.create_article(ArticleFields(title="Ciao", slug="ciao", content="x"))
        assert article.published_at is None

    @pytest.mark.asyncio
    async def test_publish_date_set_only_once(self, gateway):
        draft = await gateway.create_article(ArticleFields(title="Ciao", slug="ciao", content="x"))
        published = await gateway.update_article(
            draft.id, ArticleFields(title="Ciao", slug="ciao", content="x", status=ArticleStatus.PUBLISHED)
        )
        first_date = published.published_at
        assert first_date is not None

        again = await gateway.update_article(
            draft.id, ArticleFields(title="Ciao 2", slug="ciao", content="y", status=ArticleStatus.PUBLISHED)
        )
        assert again.published_at == first_date


@pytest.mark.unit
class TestCustomersAndSettings:
    @pytest.mark.asyncio
    async def test_manual_customer_source(self, gateway):
        customer = await gateway.create_customer(CustomerFields(name="Mario", email="m@example.com"))
        assert customer.source == CustomerSource.MANUAL
        assert customer.phone is None

    @pytest.mark.asyncio
    async def test_tags_update(self, gateway):
        customer = gateway.add_customer(name="Mario", email="m@example.com")
        updated = await gateway.update_customer_tags(customer.id, ["VIP"])
        assert updated.tags == ["VIP"]

    @pytest.mark.asyncio
    async def test_settings_map_skips_empty_values(self, gateway):
        gateway.settings.update({"site_name": "YACHT~ME", "hero_image": ""})
        assert await gateway.get_settings_map() == {"site_name": "YACHT~ME"}


@pytest.mark.unit
class TestLocalizedReads:
    @pytest.mark.asyncio
    async def test_drafts_hidden_from_visitors(self, seeded_gateway):
        assert await seeded_gateway.get_localized_article_by_slug("bozza", "it") is None
        articles = await seeded_gateway.get_localized_articles("it")
        assert "bozza" not in [a.slug for a in articles]

    @pytest.mark.asyncio
    async def test_articles_newest_first(self, seeded_gateway):
        articles = await seeded_gateway.get_localized_articles("en")
        assert [a.slug for a in articles] == ["novita-2025", "calette-gabicce"]
        assert articles[1].title == "The coves of Gabicce"

    @pytest.mark.asyncio
    async def test_inactive_services_hidden(self, seeded_gateway):
        services = await seeded_gateway.get_localized_services("it")
        assert [s.slug for s in services] == ["skipper"]
