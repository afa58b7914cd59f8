"""Storage layer for yachtme."""

from .base import (
    AuthSession,
    AuthUser,
    BookingConflictError,
    CatalogGateway,
    GatewayError,
    InvalidImageError,
)
from .supabase_client import SupabaseGateway

__all__ = [
    "CatalogGateway",
    "SupabaseGateway",
    "GatewayError",
    "BookingConflictError",
    "InvalidImageError",
    "AuthSession",
    "AuthUser",
]
