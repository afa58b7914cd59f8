"""Supabase implementation of the catalog gateway."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from supabase import Client, create_client

from ..config import get_settings
from ..models.article import Article, ArticleCategory, ArticleStatus
from ..models.boat import Boat
from ..models.booking import Booking
from ..models.customer import Customer
from ..models.service import Service
from ..models.site_setting import SiteSetting
from .base import AuthSession, AuthUser, CatalogGateway, GatewayError, _utcnow_iso

logger = logging.getLogger(__name__)

BOOKING_WITH_BOAT = "*, boat:boats(*)"


class SupabaseGateway(CatalogGateway):
    """Wrapper for Supabase table, auth and storage operations.

    The underlying client is created on first use so the application can start
    (and serve its degraded public pages) without credentials.
    """

    def __init__(self, client: Optional[Client] = None):
        settings = get_settings()
        self._client = client
        self.url = settings.supabase_url
        self.key = settings.supabase_key
        self.bucket = settings.storage_bucket

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client

    def _execute(self, query, action: str):
        """Run a query builder, mapping provider failures to GatewayError."""
        try:
            return query.execute()
        except Exception as e:
            logger.error("Supabase %s failed: %s", action, e)
            raise GatewayError(action, str(e)) from e

    def _first(self, query, action: str) -> Optional[Dict[str, Any]]:
        result = self._execute(query.limit(1), action)
        return result.data[0] if result.data else None

    def _returned(self, result, action: str) -> Dict[str, Any]:
        if not result.data:
            raise GatewayError(action, "no row returned")
        return result.data[0]

    # ==================== Boats ====================

    async def list_boats(self, featured_only: bool = False) -> List[Boat]:
        query = self.client.table(self.BOATS).select("*")
        if featured_only:
            query = query.eq("is_featured", True)
        result = self._execute(query.order("created_at", desc=True), "list boats")
        return [self._row_to_boat(row) for row in result.data]

    async def get_boat_by_slug(self, slug: str) -> Optional[Boat]:
        row = self._first(self.client.table(self.BOATS).select("*").eq("slug", slug), "get boat")
        return self._row_to_boat(row) if row else None

    async def get_boat_by_id(self, boat_id: UUID) -> Optional[Boat]:
        row = self._first(
            self.client.table(self.BOATS).select("*").eq("id", str(boat_id)), "get boat"
        )
        return self._row_to_boat(row) if row else None

    async def create_boat(self, data: Dict[str, Any]) -> Boat:
        result = self._execute(self.client.table(self.BOATS).insert(data), "create boat")
        return self._row_to_boat(self._returned(result, "create boat"))

    async def update_boat(self, boat_id: UUID, data: Dict[str, Any]) -> Boat:
        result = self._execute(
            self.client.table(self.BOATS).update(data).eq("id", str(boat_id)), "update boat"
        )
        return self._row_to_boat(self._returned(result, "update boat"))

    async def delete_boat(self, boat_id: UUID) -> None:
        self._execute(
            self.client.table(self.BOATS).delete().eq("id", str(boat_id)), "delete boat"
        )

    # ==================== Bookings ====================

    async def list_bookings(self) -> List[Booking]:
        result = self._execute(
            self.client.table(self.BOOKINGS).select(BOOKING_WITH_BOAT).order("start_date"),
            "list bookings",
        )
        return [self._row_to_booking(row) for row in result.data]

    async def list_bookings_by_boat(self, boat_id: UUID) -> List[Booking]:
        result = self._execute(
            self.client.table(self.BOOKINGS)
            .select("*")
            .eq("boat_id", str(boat_id))
            .neq("status", "cancelled")
            .order("start_date"),
            "list boat bookings",
        )
        return [self._row_to_booking(row) for row in result.data]

    async def list_bookings_by_email(self, email: str) -> List[Booking]:
        result = self._execute(
            self.client.table(self.BOOKINGS)
            .select(BOOKING_WITH_BOAT)
            .eq("customer_email", email)
            .order("start_date", desc=True),
            "list customer bookings",
        )
        return [self._row_to_booking(row) for row in result.data]

    async def get_booking(self, booking_id: UUID) -> Optional[Booking]:
        row = self._first(
            self.client.table(self.BOOKINGS).select(BOOKING_WITH_BOAT).eq("id", str(booking_id)),
            "get booking",
        )
        return self._row_to_booking(row) if row else None

    async def insert_booking(self, data: Dict[str, Any]) -> Booking:
        result = self._execute(self.client.table(self.BOOKINGS).insert(data), "create booking")
        return self._row_to_booking(self._returned(result, "create booking"))

    async def patch_booking(self, booking_id: UUID, data: Dict[str, Any]) -> Booking:
        result = self._execute(
            self.client.table(self.BOOKINGS).update(data).eq("id", str(booking_id)),
            "update booking",
        )
        return self._row_to_booking(self._returned(result, "update booking"))

    async def delete_booking(self, booking_id: UUID) -> None:
        self._execute(
            self.client.table(self.BOOKINGS).delete().eq("id", str(booking_id)),
            "delete booking",
        )

    # ==================== Customers ====================

    async def list_customers(self) -> List[Customer]:
        result = self._execute(
            self.client.table(self.CUSTOMERS).select("*").order("created_at", desc=True),
            "list customers",
        )
        return [Customer.model_validate(row) for row in result.data]

    async def get_customer(self, customer_id: UUID) -> Optional[Customer]:
        row = self._first(
            self.client.table(self.CUSTOMERS).select("*").eq("id", str(customer_id)),
            "get customer",
        )
        return Customer.model_validate(row) if row else None

    async def get_customer_by_email(self, email: str) -> Optional[Customer]:
        row = self._first(
            self.client.table(self.CUSTOMERS).select("*").eq("email", email), "get customer"
        )
        return Customer.model_validate(row) if row else None

    async def insert_customer(self, data: Dict[str, Any]) -> Customer:
        result = self._execute(self.client.table(self.CUSTOMERS).insert(data), "create customer")
        return Customer.model_validate(self._returned(result, "create customer"))

    async def patch_customer(self, customer_id: UUID, data: Dict[str, Any]) -> Customer:
        result = self._execute(
            self.client.table(self.CUSTOMERS).update(data).eq("id", str(customer_id)),
            "update customer",
        )
        return Customer.model_validate(self._returned(result, "update customer"))

    async def delete_customer(self, customer_id: UUID) -> None:
        self._execute(
            self.client.table(self.CUSTOMERS).delete().eq("id", str(customer_id)),
            "delete customer",
        )

    # ==================== Articles ====================

    async def list_articles(
        self,
        category: Optional[ArticleCategory] = None,
        status: Optional[ArticleStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Article]:
        query = (
            self.client.table(self.ARTICLES)
            .select("*")
            .order("published_at", desc=True, nullsfirst=False)
        )
        if category:
            query = query.eq("category", category.value)
        if status:
            query = query.eq("status", status.value)
        if limit:
            query = query.limit(limit)
        result = self._execute(query, "list articles")
        return [Article.model_validate(row) for row in result.data]

    async def get_article_by_slug(self, slug: str) -> Optional[Article]:
        row = self._first(
            self.client.table(self.ARTICLES).select("*").eq("slug", slug), "get article"
        )
        return Article.model_validate(row) if row else None

    async def get_article_by_id(self, article_id: UUID) -> Optional[Article]:
        row = self._first(
            self.client.table(self.ARTICLES).select("*").eq("id", str(article_id)), "get article"
        )
        return Article.model_validate(row) if row else None

    async def insert_article(self, data: Dict[str, Any]) -> Article:
        result = self._execute(self.client.table(self.ARTICLES).insert(data), "create article")
        return Article.model_validate(self._returned(result, "create article"))

    async def patch_article(self, article_id: UUID, data: Dict[str, Any]) -> Article:
        result = self._execute(
            self.client.table(self.ARTICLES).update(data).eq("id", str(article_id)),
            "update article",
        )
        return Article.model_validate(self._returned(result, "update article"))

    async def delete_article(self, article_id: UUID) -> None:
        self._execute(
            self.client.table(self.ARTICLES).delete().eq("id", str(article_id)),
            "delete article",
        )

    # ==================== Services ====================

    async def list_services(self, active_only: bool = True) -> List[Service]:
        query = self.client.table(self.SERVICES).select("*")
        if active_only:
            query = query.eq("is_active", True)
        result = self._execute(query.order("display_order"), "list services")
        return [Service.model_validate(row) for row in result.data]

    async def get_service_by_slug(self, slug: str) -> Optional[Service]:
        row = self._first(
            self.client.table(self.SERVICES).select("*").eq("slug", slug), "get service"
        )
        return Service.model_validate(row) if row else None

    async def create_service(self, data: Dict[str, Any]) -> Service:
        result = self._execute(self.client.table(self.SERVICES).insert(data), "create service")
        return Service.model_validate(self._returned(result, "create service"))

    async def update_service(self, service_id: UUID, data: Dict[str, Any]) -> Service:
        result = self._execute(
            self.client.table(self.SERVICES).update(data).eq("id", str(service_id)),
            "update service",
        )
        return Service.model_validate(self._returned(result, "update service"))

    async def delete_service(self, service_id: UUID) -> None:
        self._execute(
            self.client.table(self.SERVICES).delete().eq("id", str(service_id)),
            "delete service",
        )

    # ==================== Site settings ====================

    async def list_settings(self) -> List[SiteSetting]:
        result = self._execute(
            self.client.table(self.SETTINGS).select("*").order("key"), "list settings"
        )
        return [SiteSetting.model_validate(row) for row in result.data]

    async def get_setting(self, key: str) -> Optional[str]:
        row = self._first(
            self.client.table(self.SETTINGS).select("value").eq("key", key), "get setting"
        )
        return (row.get("value") or None) if row else None

    async def update_setting(self, key: str, value: str) -> None:
        self._execute(
            self.client.table(self.SETTINGS).upsert(
                {"key": key, "value": value, "updated_at": _utcnow_iso()},
                on_conflict="key",
            ),
            "update setting",
        )

    # ==================== Auth ====================

    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.warning("Sign-in failed for %s: %s", email, e)
            raise GatewayError("sign in", str(e)) from e

        session = response.session
        if session is None:
            raise GatewayError("sign in", "no session returned")
        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            user=self._to_auth_user(response.user or session.user),
        )

    async def sign_out(self, access_token: Optional[str] = None) -> None:
        try:
            if access_token:
                self.client.auth.admin.sign_out(access_token)
            else:
                self.client.auth.sign_out()
        except Exception as e:
            logger.error("Sign-out failed: %s", e)
            raise GatewayError("sign out", str(e)) from e

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.warning("Could not resolve user from token: %s", e)
            return None
        if response is None or response.user is None:
            return None
        return self._to_auth_user(response.user)

    # ==================== Storage ====================

    async def store_object(
        self, path: str, content: bytes, content_type: str, upsert: bool = False
    ) -> str:
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(
                path,
                content,
                {"content-type": content_type, "upsert": "true" if upsert else "false"},
            )
        except Exception as e:
            logger.error("Upload of %s failed: %s", path, e)
            raise GatewayError("upload image", str(e)) from e
        return bucket.get_public_url(path)

    async def delete_image(self, url: str) -> None:
        marker = f"/{self.bucket}/"
        path = url.split(marker, 1)[1] if marker in url else url.rsplit("/", 1)[-1]
        path = path.split("?", 1)[0]
        if not path:
            return
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as e:
            logger.error("Delete of %s failed: %s", path, e)
            raise GatewayError("delete image", str(e)) from e

    # ==================== Helper Methods ====================

    def _row_to_boat(self, row: Dict[str, Any]) -> Boat:
        return Boat.model_validate(row)

    def _row_to_booking(self, row: Dict[str, Any]) -> Booking:
        """Convert a booking row, with its optional ``boat`` join, to a model."""
        data = dict(row)
        if not data.get("boat"):
            data.pop("boat", None)
        return Booking.model_validate(data)

    @staticmethod
    def _to_auth_user(user: Any) -> AuthUser:
        return AuthUser(
            id=str(user.id),
            email=getattr(user, "email", None),
            app_metadata=dict(getattr(user, "app_metadata", None) or {}),
        )
