"""Page assemblers for the public site.

Each page issues its fetches in parallel and never raises for a failed fetch:
the failure is logged and the page falls back to default images and empty
lists. Filters are applied to the fetched data without another round-trip.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..i18n import MessageCatalog
from ..models.article import ARTICLE_CATEGORY_LABELS, ArticleCategory, LocalizedArticle
from ..models.boat import BOAT_TYPE_LABELS, FEATURE_CATEGORIES, BoatType, LocalizedBoat
from ..models.service import LocalizedService
from ..models.site_setting import (
    ABOUT_SECTION_IMAGE,
    CONTACT_ADDRESS,
    CONTACT_EMAIL,
    CONTACT_HERO_IMAGE,
    CONTACT_HOURS,
    CONTACT_PHONE,
    CONTACT_PHONE_2,
    DEFAULT_THEME,
    FLEET_HERO_IMAGE,
    HERO_IMAGE,
    SERVICES_HERO_IMAGE,
    SITE_NAME,
    SITE_TAGLINE,
    SITE_THEME,
    SOCIAL_FACEBOOK,
    SOCIAL_INSTAGRAM,
    SOCIAL_WHATSAPP,
    Theme,
)
from ..storage.base import CatalogGateway
from ..utils import format_currency
from .filters import ALL, filter_by_field

logger = logging.getLogger(__name__)

DEFAULT_IMAGES: Dict[str, str] = {
    "home": "https://images.unsplash.com/photo-1567899378494-47b22a2ae96a?w=1920&q=80",
    "about": "https://images.unsplash.com/photo-1540946485063-a40da27545f8?w=1920&q=80",
    "fleet": "https://images.unsplash.com/photo-1540946485063-a40da27545f8?w=1920&q=80",
    "escursioni": "https://images.unsplash.com/photo-1544551763-46a013bb70d5?w=1920&q=80",
    "blog": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=1920&q=80",
    "contact": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=1920&q=80",
    "services": "https://images.unsplash.com/photo-1530053969600-caed2596d242?w=1920&q=80",
}

RELATED_ARTICLES_LIMIT = 3
LEGAL_PAGES = ("privacy", "terms", "cookie")


class PageState(str, Enum):
    READY = "ready"
    EMPTY = "empty"


class FilterOption(BaseModel):
    value: str
    label: str


class HomePage(BaseModel):
    locale: str
    hero_image: str
    about_image: str
    featured_boats: List[LocalizedBoat] = Field(default_factory=list)
    state: PageState


class FleetPage(BaseModel):
    locale: str
    hero_image: str
    filters: List[FilterOption]
    active_filter: str = ALL
    boats: List[LocalizedBoat] = Field(default_factory=list)
    state: PageState


class FeatureGroup(BaseModel):
    key: str
    label: str
    enabled: List[str]


class BoatDetailPage(BaseModel):
    locale: str
    boat: LocalizedBoat
    price_full_day_text: str
    price_half_day_text: str
    feature_groups: List[FeatureGroup]


class NotFoundPage(BaseModel):
    locale: str
    message: str
    back_href: str
    back_label: str


class ServicesPage(BaseModel):
    locale: str
    hero_image: str
    services: List[LocalizedService] = Field(default_factory=list)
    state: PageState


class BlogPage(BaseModel):
    locale: str
    hero_image: str
    filters: List[FilterOption]
    active_category: str = ALL
    articles: List[LocalizedArticle] = Field(default_factory=list)
    state: PageState


class ArticleDetailPage(BaseModel):
    locale: str
    article: LocalizedArticle
    related: List[LocalizedArticle] = Field(default_factory=list)
    contact_phone: Optional[str] = None


class ContactPage(BaseModel):
    locale: str
    hero_image: str
    address_lines: List[str] = Field(default_factory=list)
    phones: List[str] = Field(default_factory=list)
    email: Optional[str] = None
    hours: Optional[str] = None


class LegalSection(BaseModel):
    title: str
    content: str


class LegalPage(BaseModel):
    locale: str
    page: str
    title: str
    sections: List[LegalSection]


class NavItem(BaseModel):
    label: str
    href: str


class SiteChrome(BaseModel):
    """Layout data shared by every public page (navbar and footer)."""

    locale: str
    site_name: str
    tagline: str
    theme: Theme = DEFAULT_THEME
    nav: List[NavItem]
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_address: Optional[str] = None
    social: Dict[str, str] = Field(default_factory=dict)


def _state(items: List[Any]) -> PageState:
    return PageState.READY if items else PageState.EMPTY


class CatalogPages:
    """Builds the public page models from gateway reads."""

    NAV = (
        ("home", "/"),
        ("fleet", "/fleet"),
        ("escursioni", "/escursioni"),
        ("services", "/services"),
        ("blog", "/blog"),
        ("contact", "/contact"),
    )

    def __init__(self, gateway: CatalogGateway, messages: MessageCatalog):
        self.gateway = gateway
        self.messages = messages

    async def _fetch(self, page: str, **calls: Awaitable[Any]) -> Dict[str, Any]:
        """Await all calls in parallel; failed ones come back as None."""
        names = list(calls)
        results = await asyncio.gather(*calls.values(), return_exceptions=True)
        out: Dict[str, Any] = {}
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.warning("Page %s: fetch of %s failed: %s", page, name, result)
                out[name] = None
            else:
                out[name] = result
        return out

    def _prefix(self, locale: str, href: str) -> str:
        # Default locale is served without a prefix
        if locale == self.messages.default:
            return href
        return f"/{locale}{href}" if href != "/" else f"/{locale}"

    async def home(self, locale: str) -> HomePage:
        data = await self._fetch(
            "home",
            hero=self.gateway.get_setting(HERO_IMAGE),
            about=self.gateway.get_setting(ABOUT_SECTION_IMAGE),
            boats=self.gateway.get_localized_featured_boats(locale),
        )
        boats = data["boats"] or []
        return HomePage(
            locale=locale,
            hero_image=data["hero"] or DEFAULT_IMAGES["home"],
            about_image=data["about"] or DEFAULT_IMAGES["about"],
            featured_boats=boats,
            state=_state(boats),
        )

    async def fleet(self, locale: str, boat_type: Optional[str] = None) -> FleetPage:
        data = await self._fetch(
            "fleet",
            boats=self.gateway.get_localized_boats(locale),
            hero=self.gateway.get_setting(FLEET_HERO_IMAGE),
        )
        selected = boat_type or ALL
        boats = filter_by_field(data["boats"] or [], "type", selected)
        filters = [FilterOption(value=ALL, label=self.messages.t(locale, "fleet.all"))]
        filters += [FilterOption(value=t.value, label=BOAT_TYPE_LABELS[t]) for t in BoatType]
        return FleetPage(
            locale=locale,
            hero_image=data["hero"] or DEFAULT_IMAGES["fleet"],
            filters=filters,
            active_filter=selected,
            boats=boats,
            state=_state(boats),
        )

    def boat_not_found(self, locale: str) -> NotFoundPage:
        return NotFoundPage(
            locale=locale,
            message=self.messages.t(locale, "fleet.notFound"),
            back_href=self._prefix(locale, "/fleet"),
            back_label=self.messages.t(locale, "fleet.backToFleet"),
        )

    async def boat_detail(self, locale: str, slug: str) -> Union[BoatDetailPage, NotFoundPage]:
        data = await self._fetch(
            "boat detail", boat=self.gateway.get_localized_boat_by_slug(slug, locale)
        )
        boat: Optional[LocalizedBoat] = data["boat"]
        if boat is None:
            return self.boat_not_found(locale)
        groups = [
            FeatureGroup(
                key=cat.key,
                label=cat.label,
                enabled=[f["label"] for f in cat.features if boat.features.enabled(f["key"])],
            )
            for cat in FEATURE_CATEGORIES
        ]
        return BoatDetailPage(
            locale=locale,
            boat=boat,
            price_full_day_text=format_currency(boat.price_full_day, locale),
            price_half_day_text=format_currency(boat.price_half_day, locale),
            feature_groups=[g for g in groups if g.enabled],
        )

    async def services(self, locale: str) -> ServicesPage:
        data = await self._fetch(
            "services",
            services=self.gateway.get_localized_services(locale),
            hero=self.gateway.get_setting(SERVICES_HERO_IMAGE),
        )
        services = data["services"] or []
        return ServicesPage(
            locale=locale,
            hero_image=data["hero"] or DEFAULT_IMAGES["services"],
            services=services,
            state=_state(services),
        )

    async def blog(self, locale: str, category: Optional[str] = None) -> BlogPage:
        data = await self._fetch(
            "blog",
            articles=self.gateway.get_localized_articles(locale),
            hero=self.gateway.get_setting(CONTACT_HERO_IMAGE),
        )
        selected = category or ALL
        articles = filter_by_field(data["articles"] or [], "category", selected)
        filters = [FilterOption(value=ALL, label=self.messages.t(locale, "blog.all"))]
        filters += [
            FilterOption(value=c.value, label=ARTICLE_CATEGORY_LABELS[c]) for c in ArticleCategory
        ]
        return BlogPage(
            locale=locale,
            hero_image=data["hero"] or DEFAULT_IMAGES["blog"],
            filters=filters,
            active_category=selected,
            articles=articles,
            state=_state(articles),
        )

    async def escursioni(self, locale: str) -> BlogPage:
        """Published excursion articles; same shape as the blog without filters."""
        data = await self._fetch(
            "escursioni",
            articles=self.gateway.get_localized_articles(
                locale, category=ArticleCategory.ESCURSIONI
            ),
            hero=self.gateway.get_setting(SERVICES_HERO_IMAGE),
        )
        articles = data["articles"] or []
        return BlogPage(
            locale=locale,
            hero_image=data["hero"] or DEFAULT_IMAGES["escursioni"],
            filters=[],
            active_category=ArticleCategory.ESCURSIONI.value,
            articles=articles,
            state=_state(articles),
        )

    async def article_detail(
        self, locale: str, slug: str
    ) -> Union[ArticleDetailPage, NotFoundPage]:
        data = await self._fetch(
            "article detail",
            article=self.gateway.get_localized_article_by_slug(slug, locale),
            articles=self.gateway.get_localized_articles(locale),
            phone=self.gateway.get_setting(CONTACT_PHONE),
        )
        article: Optional[LocalizedArticle] = data["article"]
        if article is None:
            return NotFoundPage(
                locale=locale,
                message=self.messages.t(locale, "blog.notFound"),
                back_href=self._prefix(locale, "/blog"),
                back_label=self.messages.t(locale, "blog.backToBlog"),
            )
        related = [a for a in (data["articles"] or []) if a.id != article.id]
        return ArticleDetailPage(
            locale=locale,
            article=article,
            related=related[:RELATED_ARTICLES_LIMIT],
            contact_phone=data["phone"],
        )

    async def contact(self, locale: str) -> ContactPage:
        data = await self._fetch(
            "contact",
            hero=self.gateway.get_setting(CONTACT_HERO_IMAGE),
            address=self.gateway.get_setting(CONTACT_ADDRESS),
            phone=self.gateway.get_setting(CONTACT_PHONE),
            phone_2=self.gateway.get_setting(CONTACT_PHONE_2),
            email=self.gateway.get_setting(CONTACT_EMAIL),
            hours=self.gateway.get_setting(CONTACT_HOURS),
        )
        address = data["address"]
        return ContactPage(
            locale=locale,
            hero_image=data["hero"] or DEFAULT_IMAGES["contact"],
            address_lines=[part.strip() for part in address.split(",")] if address else [],
            phones=[p for p in (data["phone"], data["phone_2"]) if p],
            email=data["email"],
            hours=data["hours"],
        )

    def legal(self, locale: str, page: str) -> Optional[LegalPage]:
        """Static legal content from the message catalog; None for unknown pages."""
        if page not in LEGAL_PAGES:
            return None
        sections = self.messages.get(locale, f"legal.{page}.sections") or []
        return LegalPage(
            locale=locale,
            page=page,
            title=self.messages.t(locale, f"legal.{page}.title"),
            sections=[LegalSection(**s) for s in sections],
        )

    async def chrome(self, locale: str) -> SiteChrome:
        data = await self._fetch("chrome", settings=self.gateway.get_settings_map())
        settings: Dict[str, str] = data["settings"] or {}
        theme = settings.get(SITE_THEME)
        social = {
            name: settings[key]
            for name, key in (
                ("facebook", SOCIAL_FACEBOOK),
                ("instagram", SOCIAL_INSTAGRAM),
                ("whatsapp", SOCIAL_WHATSAPP),
            )
            if settings.get(key)
        }
        return SiteChrome(
            locale=locale,
            site_name=settings.get(SITE_NAME) or self.messages.t(locale, "site.name"),
            tagline=settings.get(SITE_TAGLINE) or self.messages.t(locale, "site.tagline"),
            theme=Theme(theme) if theme in Theme._value2member_map_ else DEFAULT_THEME,
            nav=[
                NavItem(label=self.messages.t(locale, f"nav.{key}"), href=self._prefix(locale, href))
                for key, href in self.NAV
            ],
            contact_email=settings.get(CONTACT_EMAIL),
            contact_phone=settings.get(CONTACT_PHONE),
            contact_address=settings.get(CONTACT_ADDRESS),
            social=social,
        )
