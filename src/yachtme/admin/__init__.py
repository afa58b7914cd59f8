"""Back-office workspaces for bookings, customers, fleet and content."""

from .articles import ArticleAdmin, ArticleDraft
from .base import ActionResult
from .bookings import BookingAdmin, BookingDraft
from .calendar import DayStatus, MonthCalendar, build_month, shift_month
from .customers import CustomerAdmin, CustomerDraft
from .dashboard import DashboardStats, compute_stats, load_dashboard
from .errors import (
    ActionFailedError,
    AdminError,
    DraftValidationError,
    RecordNotFoundError,
    TransitionNotAllowedError,
)
from .fleet import BoatDraft, FleetAdmin
from .services import ServiceAdmin, ServiceDraft
from .site_settings import SettingsAdmin

__all__ = [
    "ActionResult",
    "AdminError",
    "ActionFailedError",
    "DraftValidationError",
    "RecordNotFoundError",
    "TransitionNotAllowedError",
    "ArticleAdmin",
    "ArticleDraft",
    "BookingAdmin",
    "BookingDraft",
    "CustomerAdmin",
    "CustomerDraft",
    "FleetAdmin",
    "BoatDraft",
    "ServiceAdmin",
    "ServiceDraft",
    "SettingsAdmin",
    "DashboardStats",
    "compute_stats",
    "load_dashboard",
    "DayStatus",
    "MonthCalendar",
    "build_month",
    "shift_month",
]
