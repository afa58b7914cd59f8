"""Customer CRM administration."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..catalog.filters import contains_ci
from ..models.booking import Booking
from ..models.customer import Customer, CustomerFields
from ..storage.base import CatalogGateway
from .base import DELETE_FAILED, SAVE_FAILED, ActionResult, blank, run_action
from .errors import DraftValidationError, RecordNotFoundError

logger = logging.getLogger(__name__)

RECENT_BOOKINGS_LIMIT = 5
NAME_EMAIL_REQUIRED = "Nome e email sono obbligatori"


class CustomerDraft(BaseModel):
    id: Optional[UUID] = None
    name: str = ""
    email: str = ""
    phone: str = ""
    notes: str = ""
    tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_customer(cls, customer: Customer) -> "CustomerDraft":
        return cls(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone or "",
            notes=customer.notes or "",
            tags=list(customer.tags),
        )

    def toggle_tag(self, tag: str) -> None:
        """Add the tag if absent, remove it if present."""
        if tag in self.tags:
            self.tags = [t for t in self.tags if t != tag]
        else:
            self.tags = [*self.tags, tag]

    def to_fields(self) -> CustomerFields:
        if blank(self.name) or blank(self.email):
            raise DraftValidationError(NAME_EMAIL_REQUIRED)
        return CustomerFields(
            name=self.name.strip(),
            email=self.email.strip(),
            phone=self.phone or None,
            notes=self.notes or None,
            tags=self.tags,
        )


class CustomerDetail(BaseModel):
    customer: Customer
    recent_bookings: List[Booking] = Field(default_factory=list)


class CustomerAdmin:
    """Working set of customers for one admin session or request."""

    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.customers: List[Customer] = []

    async def load(self) -> None:
        self.customers = await run_action(
            self.gateway.list_customers(), "load customers", "Errore nel caricamento clienti"
        )

    def filter(self, search: str = "", tag: Optional[str] = None) -> List[Customer]:
        """Name or email (case-insensitive) or phone substring, AND tag membership."""
        term = (search or "").strip()
        return [
            c
            for c in self.customers
            if (
                contains_ci(c.name, term)
                or contains_ci(c.email, term)
                or (bool(c.phone) and term in c.phone)
            )
            and (not tag or tag in c.tags)
        ]

    async def detail(self, customer_id: UUID) -> CustomerDetail:
        """Customer plus the five most recent bookings made with the same email.

        A failing bookings fetch leaves the list empty rather than failing the view.
        """
        customer = next((c for c in self.customers if c.id == customer_id), None)
        if customer is None:
            customer = await run_action(
                self.gateway.get_customer(customer_id), "get customer", "Errore nel caricamento clienti"
            )
        if customer is None:
            raise RecordNotFoundError("Cliente non trovato")
        try:
            bookings = await self.gateway.list_bookings_by_email(customer.email)
        except Exception as e:
            logger.error("Loading bookings for customer %s failed: %s", customer.id, e)
            bookings = []
        return CustomerDetail(customer=customer, recent_bookings=bookings[:RECENT_BOOKINGS_LIMIT])

    async def save(self, draft: CustomerDraft) -> ActionResult[Customer]:
        fields = draft.to_fields()
        if draft.id:
            saved = await run_action(
                self.gateway.update_customer(draft.id, fields), "update customer", SAVE_FAILED
            )
            message = "Cliente aggiornato"
        else:
            saved = await run_action(
                self.gateway.create_customer(fields), "create customer", SAVE_FAILED
            )
            message = "Cliente creato"
        self.customers = [c for c in self.customers if c.id != saved.id]
        self.customers.insert(0, saved)
        return ActionResult(message=message, record=saved)

    async def set_tags(self, customer_id: UUID, tags: List[str]) -> ActionResult[Customer]:
        saved = await run_action(
            self.gateway.update_customer_tags(customer_id, tags), "update tags", SAVE_FAILED
        )
        self.customers = [saved if c.id == customer_id else c for c in self.customers]
        return ActionResult(message="Cliente aggiornato", record=saved)

    async def delete(self, customer_id: UUID) -> ActionResult[Customer]:
        await run_action(
            self.gateway.delete_customer(customer_id), "delete customer", DELETE_FAILED
        )
        self.customers = [c for c in self.customers if c.id != customer_id]
        return ActionResult(message="Cliente eliminato")
