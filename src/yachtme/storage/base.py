"""Persistence gateway contract shared by the Supabase adapter and test doubles.

Concrete gateways implement the per-entity primitives. Behaviour that must be
identical whatever the backend (locale projection, article publishing dates,
booking overlap refusal, image validation and naming) lives here.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.article import Article, ArticleCategory, ArticleFields, ArticleStatus, LocalizedArticle
from ..models.boat import Boat, LocalizedBoat
from ..models.booking import Booking, BookingFields, BookingStatus
from ..models.customer import Customer, CustomerFields
from ..models.service import LocalizedService, Service
from ..models.site_setting import SiteSetting
from ..utils import sanitize_filename

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A call to the external datastore, auth or storage provider failed."""

    def __init__(self, action: str, detail: str = ""):
        self.action = action
        self.detail = detail
        super().__init__(f"{action} failed: {detail}" if detail else f"{action} failed")


class BookingConflictError(GatewayError):
    """Another confirmed booking already occupies the boat on those dates."""

    def __init__(self, boat_id: UUID, conflicting_id: UUID):
        self.boat_id = boat_id
        self.conflicting_id = conflicting_id
        super().__init__("confirm booking", f"overlaps confirmed booking {conflicting_id}")


class InvalidImageError(GatewayError):
    """Upload refused because the content type is not an image."""

    def __init__(self, content_type: Optional[str]):
        self.content_type = content_type
        super().__init__("upload image", f"unsupported content type {content_type!r}")


class AuthUser(BaseModel):
    """User record as returned by the auth provider."""

    id: str
    email: Optional[str] = None
    app_metadata: Dict[str, Any] = Field(default_factory=dict)


class AuthSession(BaseModel):
    """Session tokens issued after a successful sign-in."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user: AuthUser


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_row(model: BaseModel, **extra: Any) -> Dict[str, Any]:
    """JSON-ready column map for an insert or update."""
    data = model.model_dump(mode="json")
    if "features" in data and isinstance(data["features"], dict):
        data["features"] = {k: v for k, v in data["features"].items() if v is not None}
    data.update(extra)
    return data


class CatalogGateway(ABC):
    """Typed CRUD, auth and upload operations over the site's tables."""

    BOATS = "boats"
    BOOKINGS = "bookings"
    CUSTOMERS = "customers"
    ARTICLES = "articles"
    SERVICES = "services"
    SETTINGS = "site_settings"

    # ==================== Boats ====================

    @abstractmethod
    async def list_boats(self, featured_only: bool = False) -> List[Boat]:
        """All boats, newest first."""

    @abstractmethod
    async def get_boat_by_slug(self, slug: str) -> Optional[Boat]:
        ...

    @abstractmethod
    async def get_boat_by_id(self, boat_id: UUID) -> Optional[Boat]:
        ...

    @abstractmethod
    async def create_boat(self, data: Dict[str, Any]) -> Boat:
        ...

    @abstractmethod
    async def update_boat(self, boat_id: UUID, data: Dict[str, Any]) -> Boat:
        ...

    @abstractmethod
    async def delete_boat(self, boat_id: UUID) -> None:
        ...

    async def get_featured_boats(self) -> List[Boat]:
        return await self.list_boats(featured_only=True)

    # ==================== Bookings ====================

    @abstractmethod
    async def list_bookings(self) -> List[Booking]:
        """All bookings with their boat joined, ordered by start date."""

    @abstractmethod
    async def list_bookings_by_boat(self, boat_id: UUID) -> List[Booking]:
        """Non-cancelled bookings of one boat, ordered by start date."""

    @abstractmethod
    async def list_bookings_by_email(self, email: str) -> List[Booking]:
        """Bookings of one customer email with boat joined, newest start first."""

    @abstractmethod
    async def get_booking(self, booking_id: UUID) -> Optional[Booking]:
        ...

    @abstractmethod
    async def insert_booking(self, data: Dict[str, Any]) -> Booking:
        ...

    @abstractmethod
    async def patch_booking(self, booking_id: UUID, data: Dict[str, Any]) -> Booking:
        ...

    @abstractmethod
    async def delete_booking(self, booking_id: UUID) -> None:
        ...

    async def ensure_no_conflict(
        self,
        boat_id: UUID,
        start_date: date,
        end_date: date,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        """Refuse a confirmed range that intersects another confirmed booking."""
        for other in await self.list_bookings_by_boat(boat_id):
            if other.id == exclude_id or other.status != BookingStatus.CONFIRMED:
                continue
            if other.overlaps(start_date, end_date):
                logger.warning(
                    "Booking conflict on boat %s: %s..%s overlaps %s",
                    boat_id,
                    start_date,
                    end_date,
                    other.id,
                )
                raise BookingConflictError(boat_id, other.id)

    async def create_booking(self, fields: BookingFields) -> Booking:
        """Insert a booking; confirmed bookings must not overlap another confirmed one."""
        if fields.status == BookingStatus.CONFIRMED:
            await self.ensure_no_conflict(fields.boat_id, fields.start_date, fields.end_date)
        return await self.insert_booking(to_row(fields))

    async def update_booking(self, booking_id: UUID, fields: BookingFields) -> Booking:
        if fields.status == BookingStatus.CONFIRMED:
            await self.ensure_no_conflict(
                fields.boat_id, fields.start_date, fields.end_date, exclude_id=booking_id
            )
        return await self.patch_booking(booking_id, to_row(fields))

    async def update_booking_status(self, booking_id: UUID, status: BookingStatus) -> Booking:
        """Change only the status column of a booking."""
        if status == BookingStatus.CONFIRMED:
            current = await self.get_booking(booking_id)
            if current is not None:
                await self.ensure_no_conflict(
                    current.boat_id, current.start_date, current.end_date, exclude_id=booking_id
                )
        return await self.patch_booking(booking_id, {"status": status.value})

    # ==================== Customers ====================

    @abstractmethod
    async def list_customers(self) -> List[Customer]:
        """All customers, newest first."""

    @abstractmethod
    async def get_customer(self, customer_id: UUID) -> Optional[Customer]:
        ...

    @abstractmethod
    async def get_customer_by_email(self, email: str) -> Optional[Customer]:
        ...

    @abstractmethod
    async def insert_customer(self, data: Dict[str, Any]) -> Customer:
        ...

    @abstractmethod
    async def patch_customer(self, customer_id: UUID, data: Dict[str, Any]) -> Customer:
        ...

    @abstractmethod
    async def delete_customer(self, customer_id: UUID) -> None:
        ...

    async def create_customer(self, fields: CustomerFields) -> Customer:
        """Manually created customers are tagged with source ``manual``."""
        data = to_row(fields, source="manual")
        data["phone"] = fields.phone or None
        data["notes"] = fields.notes or None
        return await self.insert_customer(data)

    async def update_customer(self, customer_id: UUID, fields: CustomerFields) -> Customer:
        return await self.patch_customer(customer_id, to_row(fields, updated_at=_utcnow_iso()))

    async def update_customer_tags(self, customer_id: UUID, tags: List[str]) -> Customer:
        return await self.patch_customer(
            customer_id, {"tags": list(tags), "updated_at": _utcnow_iso()}
        )

    # ==================== Articles ====================

    @abstractmethod
    async def list_articles(
        self,
        category: Optional[ArticleCategory] = None,
        status: Optional[ArticleStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Article]:
        """Articles ordered by publication date, newest first, unpublished last."""

    @abstractmethod
    async def get_article_by_slug(self, slug: str) -> Optional[Article]:
        ...

    @abstractmethod
    async def get_article_by_id(self, article_id: UUID) -> Optional[Article]:
        ...

    @abstractmethod
    async def insert_article(self, data: Dict[str, Any]) -> Article:
        ...

    @abstractmethod
    async def patch_article(self, article_id: UUID, data: Dict[str, Any]) -> Article:
        ...

    @abstractmethod
    async def delete_article(self, article_id: UUID) -> None:
        ...

    async def create_article(self, fields: ArticleFields) -> Article:
        """Insert an article, stamping ``published_at`` when it starts out published."""
        published_at = _utcnow_iso() if fields.status == ArticleStatus.PUBLISHED else None
        return await self.insert_article(to_row(fields, published_at=published_at))

    async def update_article(self, article_id: UUID, fields: ArticleFields) -> Article:
        """Update an article; ``published_at`` is only set the first time it is published."""
        data = to_row(fields, updated_at=_utcnow_iso())
        if fields.status == ArticleStatus.PUBLISHED:
            existing = await self.get_article_by_id(article_id)
            if existing is not None and existing.published_at is None:
                data["published_at"] = _utcnow_iso()
        return await self.patch_article(article_id, data)

    # ==================== Services ====================

    @abstractmethod
    async def list_services(self, active_only: bool = True) -> List[Service]:
        """Services ordered by ``display_order``."""

    @abstractmethod
    async def get_service_by_slug(self, slug: str) -> Optional[Service]:
        ...

    @abstractmethod
    async def create_service(self, data: Dict[str, Any]) -> Service:
        ...

    @abstractmethod
    async def update_service(self, service_id: UUID, data: Dict[str, Any]) -> Service:
        ...

    @abstractmethod
    async def delete_service(self, service_id: UUID) -> None:
        ...

    # ==================== Site settings ====================

    @abstractmethod
    async def list_settings(self) -> List[SiteSetting]:
        """All settings ordered by key."""

    @abstractmethod
    async def get_setting(self, key: str) -> Optional[str]:
        """Value of one key; None when missing or empty."""

    @abstractmethod
    async def update_setting(self, key: str, value: str) -> None:
        """Upsert a setting on its key."""

    async def get_settings_map(self) -> Dict[str, str]:
        return {s.key: s.value for s in await self.list_settings() if s.value}

    # ==================== Auth ====================

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    @abstractmethod
    async def sign_out(self, access_token: Optional[str] = None) -> None:
        ...

    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        ...

    # ==================== Storage ====================

    @abstractmethod
    async def store_object(
        self, path: str, content: bytes, content_type: str, upsert: bool = False
    ) -> str:
        """Store bytes at ``path`` and return the public URL."""

    @abstractmethod
    async def delete_image(self, url: str) -> None:
        """Remove a previously uploaded object given its public URL."""

    @staticmethod
    def check_image(content_type: Optional[str]) -> str:
        if not content_type or not content_type.startswith("image/"):
            raise InvalidImageError(content_type)
        return content_type

    async def upload_image(self, content: bytes, filename: str, content_type: Optional[str]) -> str:
        """Store a boat image under a timestamped name and return its public URL."""
        content_type = self.check_image(content_type)
        path = f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
        return await self.store_object(path, content, content_type)

    async def upload_site_image(
        self, content: bytes, filename: str, content_type: Optional[str], setting_key: str
    ) -> str:
        """Store a hero/section image as ``site/<key>-<ts>.<ext>``, overwriting if present."""
        content_type = self.check_image(content_type)
        ext = filename.rsplit(".", 1)[-1] if "." in filename else "jpg"
        path = f"site/{setting_key}-{int(time.time() * 1000)}.{sanitize_filename(ext)}"
        return await self.store_object(path, content, content_type, upsert=True)

    # ==================== Localized reads ====================

    async def get_localized_boats(self, locale: str) -> List[LocalizedBoat]:
        return [b.localized(locale) for b in await self.list_boats()]

    async def get_localized_featured_boats(self, locale: str) -> List[LocalizedBoat]:
        return [b.localized(locale) for b in await self.get_featured_boats()]

    async def get_localized_boat_by_slug(self, slug: str, locale: str) -> Optional[LocalizedBoat]:
        boat = await self.get_boat_by_slug(slug)
        return boat.localized(locale) if boat else None

    async def get_localized_services(self, locale: str) -> List[LocalizedService]:
        return [s.localized(locale) for s in await self.list_services(active_only=True)]

    async def get_localized_articles(
        self,
        locale: str,
        category: Optional[ArticleCategory] = None,
        limit: Optional[int] = None,
    ) -> List[LocalizedArticle]:
        """Published articles only."""
        articles = await self.list_articles(
            category=category, status=ArticleStatus.PUBLISHED, limit=limit
        )
        return [a.localized(locale) for a in articles]

    async def get_localized_article_by_slug(
        self, slug: str, locale: str
    ) -> Optional[LocalizedArticle]:
        """Published article by slug; drafts are not visible to visitors."""
        article = await self.get_article_by_slug(slug)
        if article is None or not article.is_published:
            return None
        return article.localized(locale)
