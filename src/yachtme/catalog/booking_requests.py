"""Visitor booking requests from a boat's detail page."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from ..i18n import MessageCatalog
from ..models.booking import BookingFields, BookingStatus
from ..storage.base import CatalogGateway
from ..utils import calculate_days

logger = logging.getLogger(__name__)


class BookingRequest(BaseModel):
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class BookingRequestResult(BaseModel):
    message: str
    booking_id: UUID
    total_price: Optional[float] = None


class BookingRequestRejected(Exception):
    """The request cannot be stored as submitted; ``message`` is localized."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


async def submit_booking_request(
    gateway: CatalogGateway,
    messages: MessageCatalog,
    locale: str,
    slug: str,
    request: BookingRequest,
) -> Optional[BookingRequestResult]:
    """Store a pending booking for the boat behind ``slug``.

    Returns None when no boat has that slug. The total is the full-day price
    times the inclusive number of days, or None for boats priced on request.
    Gateway failures propagate.
    """
    if (
        not request.customer_name.strip()
        or not request.customer_email.strip()
        or request.start_date is None
        or request.end_date is None
    ):
        raise BookingRequestRejected(messages.t(locale, "booking.missingFields"))
    if request.start_date > request.end_date:
        raise BookingRequestRejected(messages.t(locale, "booking.invalidDates"))

    boat = await gateway.get_boat_by_slug(slug)
    if boat is None:
        return None

    total = None
    if boat.price_full_day is not None:
        total = boat.price_full_day * calculate_days(request.start_date, request.end_date)

    booking = await gateway.create_booking(
        BookingFields(
            boat_id=boat.id,
            customer_name=request.customer_name.strip(),
            customer_email=request.customer_email.strip(),
            customer_phone=request.customer_phone or None,
            start_date=request.start_date,
            end_date=request.end_date,
            status=BookingStatus.PENDING,
            notes=request.notes or None,
            total_price=total,
        )
    )
    logger.info("Booking request %s received for boat %s", booking.id, boat.slug)
    return BookingRequestResult(
        message=messages.t(locale, "booking.requestReceived"),
        booking_id=booking.id,
        total_price=total,
    )
