"""Customer CRM models."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from .base import utcnow


class CustomerSource(str, Enum):
    MANUAL = "manual"
    BOOKING = "booking"
    WEBSITE = "website"


# Suggested segmentation labels offered by the admin tag picker
AVAILABLE_TAGS: List[str] = ["VIP", "Azienda", "Fedele", "Nuovo", "Problema"]


class CustomerFields(BaseModel):
    """Attributes editable from the admin form."""

    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v):
        return [] if v is None else v


class Customer(CustomerFields):
    """A CRM record; bookings are joined by email, not by key.

    ``total_spent``, ``total_bookings`` and ``last_booking_date`` are
    maintained by the datastore and never written by this application.
    """

    id: UUID = Field(default_factory=uuid4)
    source: CustomerSource = CustomerSource.MANUAL
    total_spent: float = 0
    total_bookings: int = 0
    last_booking_date: Optional[date] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
