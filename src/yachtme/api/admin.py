"""Back-office API. Every route requires an admin access token."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from ..admin.articles import ArticleAdmin, ArticleDraft
from ..admin.base import ActionResult, run_action
from ..admin.bookings import STATUS_FILTERS, BookingAdmin, BookingDraft
from ..admin.calendar import MonthCalendar, parse_month
from ..admin.customers import CustomerAdmin, CustomerDetail, CustomerDraft
from ..admin.dashboard import DashboardStats, load_dashboard
from ..admin.fleet import BoatDraft, FleetAdmin
from ..admin.services import ICON_OPTIONS, ServiceAdmin, ServiceDraft
from ..admin.site_settings import SettingsAdmin, SettingsGroups
from ..context import ThemeContext
from ..models import (
    ARTICLE_CATEGORY_LABELS,
    ARTICLE_STATUS_LABELS,
    AVAILABLE_TAGS,
    BOAT_TYPE_LABELS,
    BOOKING_STATUS_LABELS,
    FEATURE_CATEGORIES,
    THEME_LABELS,
    Article,
    ArticleStatus,
    Boat,
    Booking,
    BookingStatus,
    Customer,
    Service,
    Theme,
)
from ..storage.base import CatalogGateway
from .dependencies import get_gateway
from .middleware.auth import AdminIdentity, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class StatusChange(BaseModel):
    status: BookingStatus


class TagsUpdate(BaseModel):
    tags: List[str]


class SettingValue(BaseModel):
    value: str


class SettingsUpdate(BaseModel):
    values: Dict[str, str]


class ThemeUpdate(BaseModel):
    theme: Theme


class ThemeState(BaseModel):
    theme: Theme


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    logger.debug("Received upload %s (%d bytes, %s)", file.filename, len(content), file.content_type)
    return content


# ==================== Dashboard & labels ====================


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(
    admin: AdminIdentity = Depends(require_admin),
    gateway: CatalogGateway = Depends(get_gateway),
):
    logger.info("Dashboard requested by %s", admin.user.email or admin.user.sub)
    return await load_dashboard(gateway)


@router.get("/meta")
async def meta():
    """Label tables and option lists used by the admin forms."""
    return {
        "boat_types": {k.value: v for k, v in BOAT_TYPE_LABELS.items()},
        "booking_statuses": {k.value: v for k, v in BOOKING_STATUS_LABELS.items()},
        "booking_status_filters": STATUS_FILTERS,
        "article_categories": {k.value: v for k, v in ARTICLE_CATEGORY_LABELS.items()},
        "article_statuses": {k.value: v for k, v in ARTICLE_STATUS_LABELS.items()},
        "service_icons": ICON_OPTIONS,
        "customer_tags": AVAILABLE_TAGS,
        "feature_categories": [c.model_dump() for c in FEATURE_CATEGORIES],
        "themes": {k.value: v for k, v in THEME_LABELS.items()},
    }


# ==================== Bookings ====================


@router.get("/bookings", response_model=List[Booking])
async def list_bookings(
    search: str = "",
    status: Optional[str] = None,
    gateway: CatalogGateway = Depends(get_gateway),
):
    workspace = BookingAdmin(gateway)
    await workspace.load()
    return workspace.filter(search, status)


@router.get("/bookings/calendar", response_model=MonthCalendar)
async def booking_calendar(
    month: Optional[str] = None,
    gateway: CatalogGateway = Depends(get_gateway),
):
    """Month grid of booking occupancy; ``month`` is ``YYYY-MM``, default current month."""
    try:
        year, month_number = parse_month(month)
    except ValueError:
        raise HTTPException(status_code=422, detail="month must be YYYY-MM")
    workspace = BookingAdmin(gateway)
    await workspace.load()
    return workspace.calendar(year, month_number)


@router.post("/bookings", response_model=ActionResult[Booking], status_code=201)
async def create_booking(draft: BookingDraft, gateway: CatalogGateway = Depends(get_gateway)):
    draft.id = None
    return await BookingAdmin(gateway).save(draft)


@router.put("/bookings/{booking_id}", response_model=ActionResult[Booking])
async def update_booking(
    booking_id: UUID,
    draft: BookingDraft,
    gateway: CatalogGateway = Depends(get_gateway),
):
    draft.id = booking_id
    return await BookingAdmin(gateway).save(draft)


@router.post("/bookings/{booking_id}/status", response_model=ActionResult[Booking])
async def change_booking_status(
    booking_id: UUID,
    body: StatusChange,
    gateway: CatalogGateway = Depends(get_gateway),
):
    return await BookingAdmin(gateway).change_status(booking_id, body.status)


@router.delete("/bookings/{booking_id}", response_model=ActionResult[Booking])
async def delete_booking(booking_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await BookingAdmin(gateway).delete(booking_id)


# ==================== Customers ====================


@router.get("/customers", response_model=List[Customer])
async def list_customers(
    search: str = "",
    tag: Optional[str] = None,
    gateway: CatalogGateway = Depends(get_gateway),
):
    workspace = CustomerAdmin(gateway)
    await workspace.load()
    return workspace.filter(search, tag)


@router.get("/customers/{customer_id}", response_model=CustomerDetail)
async def customer_detail(customer_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await CustomerAdmin(gateway).detail(customer_id)


@router.post("/customers", response_model=ActionResult[Customer], status_code=201)
async def create_customer(draft: CustomerDraft, gateway: CatalogGateway = Depends(get_gateway)):
    draft.id = None
    return await CustomerAdmin(gateway).save(draft)


@router.put("/customers/{customer_id}", response_model=ActionResult[Customer])
async def update_customer(
    customer_id: UUID,
    draft: CustomerDraft,
    gateway: CatalogGateway = Depends(get_gateway),
):
    draft.id = customer_id
    return await CustomerAdmin(gateway).save(draft)


@router.put("/customers/{customer_id}/tags", response_model=ActionResult[Customer])
async def set_customer_tags(
    customer_id: UUID,
    body: TagsUpdate,
    gateway: CatalogGateway = Depends(get_gateway),
):
    return await CustomerAdmin(gateway).set_tags(customer_id, body.tags)


@router.delete("/customers/{customer_id}", response_model=ActionResult[Customer])
async def delete_customer(customer_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await CustomerAdmin(gateway).delete(customer_id)


# ==================== Fleet ====================


@router.get("/boats", response_model=List[Boat])
async def list_boats(search: str = "", gateway: CatalogGateway = Depends(get_gateway)):
    workspace = FleetAdmin(gateway)
    await workspace.load()
    return workspace.filter(search)


@router.post("/boats", response_model=ActionResult[Boat], status_code=201)
async def create_boat(draft: BoatDraft, gateway: CatalogGateway = Depends(get_gateway)):
    draft.id = None
    return await FleetAdmin(gateway).save(draft)


@router.put("/boats/{boat_id}", response_model=ActionResult[Boat])
async def update_boat(
    boat_id: UUID,
    draft: BoatDraft,
    gateway: CatalogGateway = Depends(get_gateway),
):
    draft.id = boat_id
    return await FleetAdmin(gateway).save(draft)


@router.delete("/boats/{boat_id}", response_model=ActionResult[Boat])
async def delete_boat(boat_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await FleetAdmin(gateway).delete(boat_id)


@router.post("/boats/images", response_model=ActionResult[str], status_code=201)
async def upload_boat_image(
    file: UploadFile = File(...),
    gateway: CatalogGateway = Depends(get_gateway),
):
    """Upload a main or gallery image; the form keeps the returned URL."""
    content = await _read_upload(file)
    url = await FleetAdmin(gateway).upload_image(content, file.filename or "image", file.content_type)
    return ActionResult(message="Immagine caricata con successo", record=url)


# ==================== Articles ====================


@router.get("/articles", response_model=List[Article])
async def list_articles(
    search: str = "",
    category: Optional[str] = None,
    status: Optional[str] = None,
    gateway: CatalogGateway = Depends(get_gateway),
):
    workspace = ArticleAdmin(gateway)
    await workspace.load()
    return workspace.filter(search, category, status)


@router.get("/articles/{article_id}", response_model=Article)
async def get_article(article_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await ArticleAdmin(gateway).get(article_id)


@router.post("/articles", response_model=ActionResult[Article], status_code=201)
async def create_article(
    draft: ArticleDraft,
    status: Optional[ArticleStatus] = None,
    gateway: CatalogGateway = Depends(get_gateway),
):
    """Create an article; ``?status=published`` publishes it right away."""
    draft.id = None
    return await ArticleAdmin(gateway).save(draft, status)


@router.put("/articles/{article_id}", response_model=ActionResult[Article])
async def update_article(
    article_id: UUID,
    draft: ArticleDraft,
    status: Optional[ArticleStatus] = None,
    gateway: CatalogGateway = Depends(get_gateway),
):
    draft.id = article_id
    return await ArticleAdmin(gateway).save(draft, status)


@router.delete("/articles/{article_id}", response_model=ActionResult[Article])
async def delete_article(article_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await ArticleAdmin(gateway).delete(article_id)


@router.post("/articles/cover", response_model=ActionResult[str], status_code=201)
async def upload_article_cover(
    file: UploadFile = File(...),
    gateway: CatalogGateway = Depends(get_gateway),
):
    content = await _read_upload(file)
    return await ArticleAdmin(gateway).upload_cover(
        content, file.filename or "cover", file.content_type
    )


# ==================== Services ====================


@router.get("/services", response_model=List[Service])
async def list_services(gateway: CatalogGateway = Depends(get_gateway)):
    workspace = ServiceAdmin(gateway)
    await workspace.load()
    return workspace.services


@router.post("/services", response_model=ActionResult[Service], status_code=201)
async def create_service(draft: ServiceDraft, gateway: CatalogGateway = Depends(get_gateway)):
    draft.id = None
    return await ServiceAdmin(gateway).save(draft)


@router.put("/services/{service_id}", response_model=ActionResult[Service])
async def update_service(
    service_id: UUID,
    draft: ServiceDraft,
    gateway: CatalogGateway = Depends(get_gateway),
):
    draft.id = service_id
    return await ServiceAdmin(gateway).save(draft)


@router.post("/services/{service_id}/toggle", response_model=ActionResult[Service])
async def toggle_service(service_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    workspace = ServiceAdmin(gateway)
    await workspace.load()
    return await workspace.toggle_active(service_id)


@router.delete("/services/{service_id}", response_model=ActionResult[Service])
async def delete_service(service_id: UUID, gateway: CatalogGateway = Depends(get_gateway)):
    return await ServiceAdmin(gateway).delete(service_id)


# ==================== Settings & theme ====================


@router.get("/settings", response_model=SettingsGroups)
async def list_settings(gateway: CatalogGateway = Depends(get_gateway)):
    workspace = SettingsAdmin(gateway)
    await workspace.load()
    return workspace.groups()


@router.put("/settings", response_model=ActionResult[Dict[str, str]])
async def save_settings(body: SettingsUpdate, gateway: CatalogGateway = Depends(get_gateway)):
    return await SettingsAdmin(gateway).save_many(body.values)


@router.put("/settings/{key}", response_model=ActionResult[str])
async def save_setting(key: str, body: SettingValue, gateway: CatalogGateway = Depends(get_gateway)):
    return await SettingsAdmin(gateway).save(key, body.value)


@router.post("/settings/{key}/image", response_model=ActionResult[str], status_code=201)
async def upload_setting_image(
    key: str,
    file: UploadFile = File(...),
    gateway: CatalogGateway = Depends(get_gateway),
):
    content = await _read_upload(file)
    return await SettingsAdmin(gateway).upload_image(
        key, content, file.filename or key, file.content_type
    )


@router.get("/theme", response_model=ThemeState)
async def get_theme(gateway: CatalogGateway = Depends(get_gateway)):
    context = ThemeContext(gateway)
    return ThemeState(theme=await context.load())


@router.put("/theme", response_model=ActionResult[Theme])
async def set_theme(body: ThemeUpdate, gateway: CatalogGateway = Depends(get_gateway)):
    context = ThemeContext(gateway)
    theme = await run_action(context.set_theme(body.theme), "set theme", "Errore")
    return ActionResult(message="Salvato", record=theme)
