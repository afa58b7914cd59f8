"""Public site API: localized catalog pages, booking requests and cookie consent."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..catalog.booking_requests import (
    BookingRequest,
    BookingRequestRejected,
    BookingRequestResult,
    submit_booking_request,
)
from ..catalog.pages import (
    BlogPage,
    CatalogPages,
    ContactPage,
    FleetPage,
    HomePage,
    LegalPage,
    NotFoundPage,
    ServicesPage,
    SiteChrome,
)
from ..context import (
    CONSENT_COOKIE,
    CONSENT_MAX_AGE,
    ConsentState,
    CookieConsent,
    parse_consent,
    serialize_consent,
)
from ..i18n import MessageCatalog
from ..storage.base import CatalogGateway
from .dependencies import get_gateway, get_locale, get_message_catalog, get_pages

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/site/{locale}", tags=["site"])
consent_router = APIRouter(prefix="/api/consent", tags=["consent"])


def _not_found(page: NotFoundPage) -> JSONResponse:
    return JSONResponse(page.model_dump(mode="json"), status_code=status.HTTP_404_NOT_FOUND)


@router.get("/chrome", response_model=SiteChrome)
async def site_chrome(locale: str = Depends(get_locale), pages: CatalogPages = Depends(get_pages)):
    return await pages.chrome(locale)


@router.get("/home", response_model=HomePage)
async def home(locale: str = Depends(get_locale), pages: CatalogPages = Depends(get_pages)):
    return await pages.home(locale)


@router.get("/fleet", response_model=FleetPage)
async def fleet(
    type: Optional[str] = None,
    locale: str = Depends(get_locale),
    pages: CatalogPages = Depends(get_pages),
):
    """Fleet listing, optionally filtered by boat type (``all`` shows everything)."""
    return await pages.fleet(locale, type)


@router.get("/fleet/{slug}")
async def boat_detail(
    slug: str,
    locale: str = Depends(get_locale),
    pages: CatalogPages = Depends(get_pages),
):
    page = await pages.boat_detail(locale, slug)
    if isinstance(page, NotFoundPage):
        return _not_found(page)
    return page


@router.post(
    "/fleet/{slug}/booking-requests",
    response_model=BookingRequestResult,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking_request(
    slug: str,
    body: BookingRequest,
    locale: str = Depends(get_locale),
    gateway: CatalogGateway = Depends(get_gateway),
    messages: MessageCatalog = Depends(get_message_catalog),
    pages: CatalogPages = Depends(get_pages),
):
    """Store a pending booking request for a boat."""
    try:
        result = await submit_booking_request(gateway, messages, locale, slug, body)
    except BookingRequestRejected as e:
        return JSONResponse({"message": e.message}, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    if result is None:
        return _not_found(pages.boat_not_found(locale))
    return result


@router.get("/services", response_model=ServicesPage)
async def services(locale: str = Depends(get_locale), pages: CatalogPages = Depends(get_pages)):
    return await pages.services(locale)


@router.get("/blog", response_model=BlogPage)
async def blog(
    category: Optional[str] = None,
    locale: str = Depends(get_locale),
    pages: CatalogPages = Depends(get_pages),
):
    return await pages.blog(locale, category)


@router.get("/blog/{slug}")
async def article_detail(
    slug: str,
    locale: str = Depends(get_locale),
    pages: CatalogPages = Depends(get_pages),
):
    page = await pages.article_detail(locale, slug)
    if isinstance(page, NotFoundPage):
        return _not_found(page)
    return page


@router.get("/escursioni", response_model=BlogPage)
async def escursioni(locale: str = Depends(get_locale), pages: CatalogPages = Depends(get_pages)):
    return await pages.escursioni(locale)


@router.get("/contact", response_model=ContactPage)
async def contact(locale: str = Depends(get_locale), pages: CatalogPages = Depends(get_pages)):
    return await pages.contact(locale)


@router.get("/legal/{page}", response_model=LegalPage)
async def legal(
    page: str,
    locale: str = Depends(get_locale),
    pages: CatalogPages = Depends(get_pages),
):
    legal_page = pages.legal(locale, page)
    if legal_page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return legal_page


class ConsentUpdate(BaseModel):
    """Banner choice: accept everything, reject optional cookies, or pick categories."""

    action: Literal["accept_all", "reject_all", "custom"]
    analytics: Optional[bool] = None
    marketing: Optional[bool] = None
    maps: Optional[bool] = None


@consent_router.get("", response_model=ConsentState)
async def get_consent(request: Request):
    return ConsentState.from_cookie(request.cookies.get(CONSENT_COOKIE))


@consent_router.post("", response_model=ConsentState)
async def update_consent(body: ConsentUpdate, request: Request, response: Response):
    """Record the visitor's choice in the versioned consent cookie."""
    if body.action == "accept_all":
        consent = CookieConsent.accept_all()
    elif body.action == "reject_all":
        consent = CookieConsent.reject_all()
    else:
        current = parse_consent(request.cookies.get(CONSENT_COOKIE)) or CookieConsent()
        consent = current.with_preferences(
            analytics=body.analytics, marketing=body.marketing, maps=body.maps
        )
    response.set_cookie(
        CONSENT_COOKIE,
        serialize_consent(consent),
        max_age=CONSENT_MAX_AGE,
        path="/",
        samesite="lax",
    )
    return ConsentState(consent=consent, has_consented=True, show_banner=False)


@consent_router.delete("", response_model=ConsentState)
async def reset_consent(response: Response):
    """Forget the stored choice so the banner shows again."""
    response.delete_cookie(CONSENT_COOKIE, path="/")
    return ConsentState()
