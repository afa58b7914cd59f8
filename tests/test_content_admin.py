"""Tests for article, service, settings and dashboard administration."""

from __future__ import annotations

from datetime import date

import pytest
import pytest_asyncio

from yachtme.admin import (
    ArticleAdmin,
    ArticleDraft,
    DraftValidationError,
    RecordNotFoundError,
    ServiceAdmin,
    ServiceDraft,
    SettingsAdmin,
    compute_stats,
    load_dashboard,
)
from yachtme.admin.dashboard import greeting_for
from yachtme.admin.services import split_lines
from yachtme.models.article import ArticleStatus
from yachtme.models.service import ServiceIcon


@pytest.mark.unit
class TestArticleDraft:
    def test_slug_follows_title(self):
        draft = ArticleDraft()
        draft.set_title("Giro in barca")
        assert draft.slug == "giro-in-barca"
        draft.set_title("Giro in barca a Rimini")
        assert draft.slug == "giro-in-barca-a-rimini"

    def test_hand_edited_slug_kept(self):
        draft = ArticleDraft()
        draft.set_title("Giro in barca")
        draft.slug = "giro"
        draft.set_title("Altro titolo")
        assert draft.slug == "giro"

    def test_title_and_content_required(self):
        with pytest.raises(DraftValidationError):
            ArticleDraft(title="Solo titolo").to_fields()

    def test_status_override(self):
        fields = ArticleDraft(title="T", content="C").to_fields(ArticleStatus.PUBLISHED)
        assert fields.status == ArticleStatus.PUBLISHED
        assert fields.slug == "t"
        assert fields.author == "Rimini Charter"


@pytest.mark.unit
class TestArticleAdmin:
    @pytest_asyncio.fixture
    async def articles(self, seeded_gateway):
        admin = ArticleAdmin(seeded_gateway)
        await admin.load()
        return admin

    @pytest.mark.asyncio
    async def test_load_includes_drafts(self, articles):
        assert len(articles.articles) == 3

    @pytest.mark.asyncio
    async def test_filter(self, articles):
        assert [a.slug for a in articles.filter(status="draft")] == ["bozza"]
        assert [a.slug for a in articles.filter(category="escursioni")] == ["calette-gabicce"]
        assert [a.slug for a in articles.filter("CALETTE")] == ["calette-gabicce"]

    @pytest.mark.asyncio
    async def test_publish_draft(self, articles):
        bozza = articles.filter(status="draft")[0]
        result = await articles.save(ArticleDraft.from_article(bozza), ArticleStatus.PUBLISHED)
        assert result.message == "Articolo aggiornato"
        assert result.record.published_at is not None
        assert articles.articles[0].id == bozza.id

    @pytest.mark.asyncio
    async def test_create(self, articles):
        result = await articles.save(ArticleDraft(title="Nuovo", content="Testo"))
        assert result.message == "Articolo creato"
        assert result.record.status == ArticleStatus.DRAFT
        assert len(articles.articles) == 4

    @pytest.mark.asyncio
    async def test_get_unknown(self, articles):
        from uuid import uuid4

        with pytest.raises(RecordNotFoundError):
            await articles.get(uuid4())

    @pytest.mark.asyncio
    async def test_delete(self, articles):
        bozza = articles.filter(status="draft")[0]
        await articles.delete(bozza.id)
        assert articles.filter(status="draft") == []

    @pytest.mark.asyncio
    async def test_cover_upload(self, articles, seeded_gateway):
        result = await articles.upload_cover(b"img", "cover.png", "image/png")
        assert "site/article-cover-" in result.record
        with pytest.raises(DraftValidationError):
            await articles.upload_cover(b"x", "x.txt", "text/plain")


@pytest.mark.unit
class TestServiceAdmin:
    @pytest_asyncio.fixture
    async def services(self, seeded_gateway):
        admin = ServiceAdmin(seeded_gateway)
        await admin.load()
        return admin

    def test_split_lines(self):
        assert split_lines("uno\n\n  due  \n") == ["uno", "due"]

    def test_new_service_slug_from_name(self):
        draft = ServiceDraft()
        draft.set_name("Cena a bordo")
        assert draft.slug == "cena-a-bordo"

    def test_payload(self):
        payload = ServiceDraft(
            name="Cena", features_text="Vino\nPesce", icon=ServiceIcon.WINE
        ).to_payload()
        assert payload["features"] == ["Vino", "Pesce"]
        assert payload["features_en"] == []
        assert payload["icon"] == "Wine"
        assert payload["slug"] == "cena"
        assert "features_text" not in payload

    @pytest.mark.asyncio
    async def test_load_includes_inactive(self, services):
        assert [s.slug for s in services.services] == ["skipper", "catering"]

    @pytest.mark.asyncio
    async def test_toggle(self, services):
        catering = services.services[1]
        result = await services.toggle_active(catering.id)
        assert result.message == "Servizio attivato"
        assert services.services[1].is_active

    @pytest.mark.asyncio
    async def test_existing_service_keeps_slug(self, services):
        draft = ServiceDraft.from_service(services.services[0])
        draft.set_name("Skipper professionista")
        result = await services.save(draft)
        assert result.record.slug == "skipper"
        assert result.message == "Servizio aggiornato"

    @pytest.mark.asyncio
    async def test_failed_reload_keeps_successful_save(self, services, seeded_gateway):
        seeded_gateway.fail_on = {"list_services"}
        result = await services.save(ServiceDraft(name="Aperitivo al tramonto"))
        assert result.message == "Servizio creato"
        assert services.services[-1].slug == "aperitivo-al-tramonto"
        assert "aperitivo-al-tramonto" in {r["slug"] for r in seeded_gateway.services.values()}


@pytest.mark.unit
class TestSettingsAdmin:
    @pytest_asyncio.fixture
    async def settings_admin(self, seeded_gateway):
        admin = SettingsAdmin(seeded_gateway)
        await admin.load()
        return admin

    @pytest.mark.asyncio
    async def test_groups(self, settings_admin):
        groups = settings_admin.groups()
        assert [e.key for e in groups.images] == ["hero_image"]
        assert [e.key for e in groups.site] == ["site_name"]
        assert {e.key for e in groups.contact} == {"contact_address", "contact_phone"}
        assert groups.images[0].label == "Homepage Hero"

    @pytest.mark.asyncio
    async def test_save_many(self, settings_admin, seeded_gateway):
        await settings_admin.save_many({"site_tagline": "Mare", "contact_email": "info@yachtme.it"})
        assert seeded_gateway.settings["site_tagline"] == "Mare"
        assert settings_admin.value("contact_email") == "info@yachtme.it"

    @pytest.mark.asyncio
    async def test_upload_points_setting_at_url(self, settings_admin, seeded_gateway):
        result = await settings_admin.upload_image("hero_image", b"img", "hero.jpg", "image/jpeg")
        assert seeded_gateway.settings["hero_image"] == result.record
        assert settings_admin.value("hero_image") == result.record

    @pytest.mark.asyncio
    async def test_upload_unknown_key(self, settings_admin):
        with pytest.raises(DraftValidationError):
            await settings_admin.upload_image("site_name", b"img", "a.jpg", "image/jpeg")


@pytest.mark.unit
class TestDashboard:
    def test_greeting(self):
        assert greeting_for(9) == "Buongiorno"
        assert greeting_for(15) == "Buon pomeriggio"
        assert greeting_for(20) == "Buonasera"

    @pytest.mark.asyncio
    async def test_stats(self, seeded_gateway):
        stats = await load_dashboard(seeded_gateway, today=date(2025, 7, 1))
        assert stats.total_boats == 2
        assert stats.total_bookings == 2
        assert stats.monthly_revenue == 3600
        assert stats.monthly_revenue_text == "3.600 €"
        assert stats.active_customers == 2
        assert [b.customer_name for b in stats.upcoming] == ["Mario Rossi", "Anna Bianchi"]

    def test_empty(self):
        stats = compute_stats([], [], date(2025, 7, 1), hour=8)
        assert stats.monthly_revenue_text == "0 €"
        assert stats.greeting == "Buongiorno"
