"""Month calendar of boat occupancy for the bookings admin."""

from __future__ import annotations

import calendar
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..models.booking import Booking, BookingStatus

MONTH_NAMES_IT = [
    "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno",
    "luglio", "agosto", "settembre", "ottobre", "novembre", "dicembre",
]

WEEKDAY_LABELS_IT = ["Dom", "Lun", "Mar", "Mer", "Gio", "Ven", "Sab"]


class DayStatus(str, Enum):
    FREE = "free"
    CONFIRMED = "confirmed"
    PENDING = "pending"
    MIXED = "mixed"


class CalendarDay(BaseModel):
    day: date
    status: DayStatus
    booking_ids: List[str] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.booking_ids)


class MonthCalendar(BaseModel):
    year: int
    month: int
    title: str
    weekdays: List[str] = Field(default_factory=lambda: list(WEEKDAY_LABELS_IT))
    leading_blanks: int  # grid starts on Sunday
    days: List[CalendarDay]


def active_bookings_on(bookings: Iterable[Booking], day: date) -> List[Booking]:
    """Bookings occupying a boat on ``day`` (inclusive range, cancelled excluded)."""
    return [b for b in bookings if b.is_active_on(day)]


def day_status(active: List[Booking]) -> DayStatus:
    statuses = {b.status for b in active}
    if not statuses:
        return DayStatus.FREE
    if statuses == {BookingStatus.CONFIRMED}:
        return DayStatus.CONFIRMED
    if statuses == {BookingStatus.PENDING}:
        return DayStatus.PENDING
    return DayStatus.MIXED


def build_month(bookings: Iterable[Booking], year: int, month: int) -> MonthCalendar:
    """Compute per-day occupancy for one month.

    Every day is tested against every booking; nothing is pre-indexed.
    """
    bookings = list(bookings)
    first_weekday, days_in_month = calendar.monthrange(year, month)
    days = []
    for d in range(1, days_in_month + 1):
        current = date(year, month, d)
        active = active_bookings_on(bookings, current)
        days.append(
            CalendarDay(
                day=current,
                status=day_status(active),
                booking_ids=[str(b.id) for b in active],
            )
        )
    return MonthCalendar(
        year=year,
        month=month,
        title=f"{MONTH_NAMES_IT[month - 1]} {year}",
        # calendar.monthrange counts Monday as 0
        leading_blanks=(first_weekday + 1) % 7,
        days=days,
    )


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months forward (or back when negative)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def parse_month(value: Optional[str], today: Optional[date] = None) -> Tuple[int, int]:
    """Parse ``YYYY-MM``; missing values mean the current month."""
    if not value:
        today = today or date.today()
        return today.year, today.month
    year_s, month_s = value.split("-", 1)
    year, month = int(year_s), int(month_s)
    if not 1 <= month <= 12:
        raise ValueError(f"invalid month: {value}")
    return year, month
