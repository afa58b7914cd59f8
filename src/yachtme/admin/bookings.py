"""Booking administration: list, filters, calendar, editing and status changes."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ValidationError

from ..catalog.filters import ALL, contains_ci
from ..models.boat import Boat
from ..models.booking import STATUS_TRANSITIONS, Booking, BookingFields, BookingStatus
from ..storage.base import CatalogGateway
from .base import (
    DELETE_FAILED,
    LOAD_FAILED,
    REQUIRED_FIELDS,
    SAVE_FAILED,
    UPDATE_FAILED,
    ActionResult,
    blank,
    run_action,
)
from .calendar import MonthCalendar, build_month
from .errors import DraftValidationError, RecordNotFoundError, TransitionNotAllowedError

logger = logging.getLogger(__name__)

INVALID_RANGE = "La data di fine deve essere successiva alla data di inizio"

STATUS_FILTERS = [
    {"label": "Tutte", "value": ALL},
    {"label": "In Attesa", "value": BookingStatus.PENDING.value},
    {"label": "Confermate", "value": BookingStatus.CONFIRMED.value},
    {"label": "Annullate", "value": BookingStatus.CANCELLED.value},
]


class BookingDraft(BaseModel):
    """Booking form state; every field may still be empty while editing."""

    id: Optional[UUID] = None
    boat_id: Optional[UUID] = None
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: str = ""
    total_price: Optional[float] = None
    status: BookingStatus = BookingStatus.PENDING

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingDraft":
        return cls(
            id=booking.id,
            boat_id=booking.boat_id,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone or "",
            start_date=booking.start_date,
            end_date=booking.end_date,
            notes=booking.notes or "",
            total_price=booking.total_price,
            status=booking.status,
        )

    def to_fields(self) -> BookingFields:
        """Validate and convert to writable fields.

        Raises:
            DraftValidationError: Required fields are missing or the range is inverted.
        """
        if (
            blank(self.customer_name)
            or blank(self.customer_email)
            or self.boat_id is None
            or self.start_date is None
            or self.end_date is None
        ):
            raise DraftValidationError(REQUIRED_FIELDS)
        if self.start_date > self.end_date:
            raise DraftValidationError(INVALID_RANGE)
        try:
            return BookingFields(
                boat_id=self.boat_id,
                customer_name=self.customer_name.strip(),
                customer_email=self.customer_email.strip(),
                customer_phone=self.customer_phone or None,
                start_date=self.start_date,
                end_date=self.end_date,
                notes=self.notes or None,
                total_price=self.total_price,
                status=self.status,
            )
        except ValidationError as e:
            raise DraftValidationError(REQUIRED_FIELDS) from e


class BookingAdmin:
    """In-memory working set of bookings for one admin session or request."""

    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.bookings: List[Booking] = []
        self.boats: List[Boat] = []

    async def load(self) -> None:
        """Fetch bookings (with boats joined) and the boat list in parallel."""
        bookings, boats = await run_action(
            asyncio.gather(self.gateway.list_bookings(), self.gateway.list_boats()),
            "load bookings",
            LOAD_FAILED,
        )
        self.bookings = bookings
        self.boats = boats

    def filter(self, search: str = "", status: Optional[str] = ALL) -> List[Booking]:
        """Substring search on customer name, email or boat name AND exact status."""
        term = (search or "").strip()
        return [
            b
            for b in self.bookings
            if (
                contains_ci(b.customer_name, term)
                or contains_ci(b.customer_email, term)
                or contains_ci(b.boat_name, term)
            )
            and (status in (None, ALL) or b.status.value == status)
        ]

    def calendar(self, year: int, month: int) -> MonthCalendar:
        return build_month(self.bookings, year, month)

    async def _find(self, booking_id: UUID) -> Booking:
        for b in self.bookings:
            if b.id == booking_id:
                return b
        booking = await run_action(
            self.gateway.get_booking(booking_id), "get booking", LOAD_FAILED
        )
        if booking is None:
            raise RecordNotFoundError("Prenotazione non trovata")
        return booking

    async def save(self, draft: BookingDraft) -> ActionResult[Booking]:
        """Create or update from a draft, then refresh the working set."""
        fields = draft.to_fields()
        if draft.id:
            saved = await run_action(
                self.gateway.update_booking(draft.id, fields), "update booking", SAVE_FAILED
            )
            message = "Prenotazione aggiornata"
        else:
            saved = await run_action(
                self.gateway.create_booking(fields), "create booking", SAVE_FAILED
            )
            message = "Prenotazione creata"
        logger.info("%s: %s", message, saved.id)
        try:
            await self.load()
        except Exception as e:
            logger.warning("Reload after booking save failed: %s", e)
        return ActionResult(message=message, record=saved)

    async def change_status(
        self, booking_id: UUID, status: BookingStatus
    ) -> ActionResult[Booking]:
        """Apply a status transition offered by the UI (pending to confirmed/cancelled)."""
        current = await self._find(booking_id)
        if status not in STATUS_TRANSITIONS[current.status]:
            raise TransitionNotAllowedError(
                f"Transizione non consentita: {current.status.value} -> {status.value}"
            )
        updated = await run_action(
            self.gateway.update_booking_status(booking_id, status),
            "update booking status",
            UPDATE_FAILED,
        )
        self.bookings = [
            b.model_copy(update={"status": status}) if b.id == booking_id else b
            for b in self.bookings
        ]
        verb = "confermata" if status == BookingStatus.CONFIRMED else "annullata"
        return ActionResult(message=f"Prenotazione {verb}", record=updated)

    async def delete(self, booking_id: UUID) -> ActionResult[Booking]:
        await run_action(self.gateway.delete_booking(booking_id), "delete booking", DELETE_FAILED)
        self.bookings = [b for b in self.bookings if b.id != booking_id]
        return ActionResult(message="Prenotazione eliminata")
