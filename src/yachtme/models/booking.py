"""Booking models and the status lifecycle."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from .base import utcnow
from .boat import Boat


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


BOOKING_STATUS_LABELS: Dict[BookingStatus, str] = {
    BookingStatus.PENDING: "In Attesa",
    BookingStatus.CONFIRMED: "Confermata",
    BookingStatus.CANCELLED: "Annullata",
}

# Transitions offered by the status action; confirmed and cancelled are terminal there.
STATUS_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


class BookingFields(BaseModel):
    """Writable booking attributes."""

    boat_id: UUID
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    start_date: date
    end_date: date
    status: BookingStatus = BookingStatus.PENDING
    notes: Optional[str] = None
    total_price: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def is_active_on(self, day: date) -> bool:
        """Whether the booking occupies its boat on ``day``.

        The range is inclusive on both ends and cancelled bookings occupy nothing.
        """
        if self.status == BookingStatus.CANCELLED:
            return False
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        """Inclusive range intersection, regardless of status."""
        return self.start_date <= end and start <= self.end_date


class Booking(BookingFields):
    """A reservation of one boat for an inclusive date range."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)
    boat: Optional[Boat] = None  # joined row, when requested

    @property
    def status_label(self) -> str:
        return BOOKING_STATUS_LABELS[self.status]

    @property
    def boat_name(self) -> str:
        return self.boat.name if self.boat else ""
