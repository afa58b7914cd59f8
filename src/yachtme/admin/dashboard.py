"""Admin dashboard statistics."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from ..models.boat import Boat
from ..models.booking import Booking, BookingStatus
from ..storage.base import CatalogGateway
from ..utils import format_currency
from .base import LOAD_FAILED, run_action

UPCOMING_LIMIT = 5


class DashboardStats(BaseModel):
    total_boats: int = 0
    total_bookings: int = 0
    monthly_revenue: float = 0
    monthly_revenue_text: str = ""
    active_customers: int = 0
    greeting: str = ""
    upcoming: List[Booking] = Field(default_factory=list)


def greeting_for(hour: int) -> str:
    if hour < 12:
        return "Buongiorno"
    if hour < 18:
        return "Buon pomeriggio"
    return "Buonasera"


def compute_stats(
    boats: List[Boat],
    bookings: Iterable[Booking],
    today: date,
    hour: Optional[int] = None,
) -> DashboardStats:
    """Aggregate counts over non-cancelled bookings.

    Revenue covers bookings starting in the month of ``today``; upcoming lists
    the next bookings starting today or later that have a boat joined.
    """
    live = [b for b in bookings if b.status != BookingStatus.CANCELLED]
    monthly = [
        b for b in live if b.start_date.year == today.year and b.start_date.month == today.month
    ]
    revenue = sum(b.total_price or 0 for b in monthly)
    upcoming = sorted(
        (b for b in live if b.start_date >= today and b.boat is not None),
        key=lambda b: b.start_date,
    )[:UPCOMING_LIMIT]
    return DashboardStats(
        total_boats=len(boats),
        total_bookings=len(live),
        monthly_revenue=revenue,
        monthly_revenue_text=format_currency(revenue),
        active_customers=len({b.customer_email for b in live}),
        greeting=greeting_for(hour if hour is not None else datetime.now().hour),
        upcoming=upcoming,
    )


async def load_dashboard(gateway: CatalogGateway, today: Optional[date] = None) -> DashboardStats:
    boats, bookings = await run_action(
        asyncio.gather(gateway.list_boats(), gateway.list_bookings()),
        "load dashboard",
        LOAD_FAILED,
    )
    return compute_stats(boats, bookings, today or date.today())
