"""Public catalog views."""

from .booking_requests import (
    BookingRequest,
    BookingRequestRejected,
    BookingRequestResult,
    submit_booking_request,
)
from .filters import ALL, contains_ci, filter_by_field
from .pages import DEFAULT_IMAGES, CatalogPages, NotFoundPage, PageState

__all__ = [
    "ALL",
    "BookingRequest",
    "BookingRequestRejected",
    "BookingRequestResult",
    "CatalogPages",
    "DEFAULT_IMAGES",
    "NotFoundPage",
    "PageState",
    "contains_ci",
    "filter_by_field",
    "submit_booking_request",
]
