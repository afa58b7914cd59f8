"""Service catalog administration."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from ..models.service import SERVICE_ICON_LABELS, Service, ServiceIcon
from ..storage.base import CatalogGateway, to_row
from ..utils import generate_slug
from .base import DELETE_FAILED, SAVE_FAILED, UPDATE_FAILED, ActionResult, blank, run_action
from .errors import ActionFailedError, DraftValidationError, RecordNotFoundError

logger = logging.getLogger(__name__)

ICON_OPTIONS = [{"value": icon.value, "label": label} for icon, label in SERVICE_ICON_LABELS.items()]


def split_lines(text: str) -> List[str]:
    """One feature per non-blank line."""
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


class ServiceDraft(BaseModel):
    """Service form state; features are edited as newline-separated text."""

    id: Optional[UUID] = None
    name: str = ""
    name_en: str = ""
    slug: str = ""
    description: str = ""
    description_en: str = ""
    features_text: str = ""
    features_text_en: str = ""
    price_text: str = ""
    price_text_en: str = ""
    icon: ServiceIcon = ServiceIcon.ANCHOR
    image_url: str = ""
    display_order: int = 0
    is_active: bool = True

    @classmethod
    def from_service(cls, service: Service) -> "ServiceDraft":
        return cls(
            id=service.id,
            name=service.name,
            name_en=service.name_en or "",
            slug=service.slug,
            description=service.description or "",
            description_en=service.description_en or "",
            features_text="\n".join(service.features),
            features_text_en="\n".join(service.features_en),
            price_text=service.price_text or "",
            price_text_en=service.price_text_en or "",
            icon=service.icon,
            image_url=service.image_url or "",
            display_order=service.display_order,
            is_active=service.is_active,
        )

    def set_name(self, name: str) -> None:
        """New services derive their slug from the name; existing ones keep it."""
        self.name = name
        if self.id is None:
            self.slug = generate_slug(name)

    def to_payload(self) -> dict:
        if blank(self.name):
            raise DraftValidationError("Il nome è obbligatorio")
        data = to_row(self, features=split_lines(self.features_text))
        for key in ("id", "features_text", "features_text_en"):
            data.pop(key, None)
        data["slug"] = self.slug or generate_slug(self.name)
        data["features_en"] = split_lines(self.features_text_en)
        for key in ("name_en", "description", "description_en", "price_text", "price_text_en", "image_url"):
            data[key] = data[key] or None
        return data


class ServiceAdmin:
    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.services: List[Service] = []

    async def load(self) -> None:
        """All services, inactive ones included, by display order."""
        self.services = await run_action(
            self.gateway.list_services(active_only=False),
            "load services",
            "Errore nel caricamento servizi",
        )

    async def save(self, draft: ServiceDraft) -> ActionResult[Service]:
        payload = draft.to_payload()
        if draft.id:
            saved = await run_action(
                self.gateway.update_service(draft.id, payload), "update service", SAVE_FAILED
            )
            message = "Servizio aggiornato"
        else:
            saved = await run_action(
                self.gateway.create_service(payload), "create service", SAVE_FAILED
            )
            message = "Servizio creato"
        logger.info("%s: %s", message, saved.slug)
        try:
            await self.load()
        except ActionFailedError as e:
            logger.warning("Reload after service save failed: %s", e)
            self.services = [s for s in self.services if s.id != saved.id] + [saved]
        return ActionResult(message=message, record=saved)

    async def toggle_active(self, service_id: UUID) -> ActionResult[Service]:
        """Show or hide a service without deleting it."""
        current = next((s for s in self.services if s.id == service_id), None)
        if current is None:
            raise RecordNotFoundError("Servizio non trovato")
        saved = await run_action(
            self.gateway.update_service(service_id, {"is_active": not current.is_active}),
            "toggle service",
            UPDATE_FAILED,
        )
        self.services = [saved if s.id == service_id else s for s in self.services]
        message = "Servizio attivato" if saved.is_active else "Servizio disattivato"
        return ActionResult(message=message, record=saved)

    async def delete(self, service_id: UUID) -> ActionResult[Service]:
        await run_action(self.gateway.delete_service(service_id), "delete service", DELETE_FAILED)
        self.services = [s for s in self.services if s.id != service_id]
        return ActionResult(message="Servizio eliminato")
