"""Fleet administration: the multi-section boat editor and its save contract.

A draft holds every tab's fields at once (base info, specs, features, services
and the IT/EN texts). Nothing is written until ``FleetAdmin.save`` commits the
whole draft in one create or update call.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import ConfigDict

from ..catalog.filters import contains_ci
from ..models.boat import (
    BOAT_TYPE_LABELS,
    TOGGLE_FEATURE_KEYS,
    Boat,
    BoatFields,
    ExtraService,
    ExtraServiceUnit,
)
from ..storage.base import CatalogGateway, GatewayError, InvalidImageError, to_row
from ..utils import generate_slug
from .base import DELETE_FAILED, SAVE_FAILED, ActionResult, blank, run_action
from .errors import ActionFailedError, DraftValidationError

logger = logging.getLogger(__name__)

LIST_FIELDS = ("highlights", "included_services", "excluded_services")

NAME_REQUIRED = "Il nome è obbligatorio"
DUPLICATE_SLUG = "Esiste già una barca con questo nome"
IMAGES_ONLY = "Solo immagini"
UPLOAD_FAILED = "Errore nel caricamento immagine"


class BoatDraft(BoatFields):
    """Editable copy of a boat. A new draft starts as a dinghy with no prices."""

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[UUID] = None

    @classmethod
    def from_boat(cls, boat: Boat) -> "BoatDraft":
        return cls(**boat.model_dump(exclude={"slug", "created_at"}))

    def toggle_feature(self, key: str) -> None:
        """Flip a boolean amenity, creating it when absent."""
        if key not in TOGGLE_FEATURE_KEYS:
            raise DraftValidationError(f"Dotazione sconosciuta: {key}")
        current = bool(getattr(self.features, key))
        self.features = self.features.model_copy(update={key: not current})

    def set_feature_count(self, key: str, value: Optional[int]) -> None:
        if key not in ("cabins", "bathrooms"):
            raise DraftValidationError(f"Dotazione sconosciuta: {key}")
        self.features = self.features.model_copy(update={key: value})

    def add_to_list(self, field: str, value: str) -> bool:
        """Append a trimmed value; blank input is ignored."""
        if field not in LIST_FIELDS:
            raise ValueError(f"not a list field: {field}")
        value = (value or "").strip()
        if not value:
            return False
        setattr(self, field, [*getattr(self, field), value])
        return True

    def remove_from_list(self, field: str, index: int) -> None:
        if field not in LIST_FIELDS:
            raise ValueError(f"not a list field: {field}")
        setattr(self, field, [v for i, v in enumerate(getattr(self, field)) if i != index])

    def add_extra_service(
        self, name: str, price: float, unit: ExtraServiceUnit = ExtraServiceUnit.DAY
    ) -> bool:
        """Append a priced extra; needs a name and a positive price."""
        if blank(name) or price is None or price <= 0:
            return False
        self.extra_services = [
            *self.extra_services,
            ExtraService(name=name.strip(), price=price, unit=unit),
        ]
        return True

    def remove_extra_service(self, index: int) -> None:
        self.extra_services = [e for i, e in enumerate(self.extra_services) if i != index]

    def remove_gallery_image(self, index: int) -> None:
        self.gallery_urls = [u for i, u in enumerate(self.gallery_urls) if i != index]

    @property
    def slug(self) -> str:
        return generate_slug(self.name)

    def to_payload(self) -> Dict[str, Any]:
        """Column map for the gateway; blank texts are stored as null, a zero price stays zero."""
        data = to_row(self)
        data.pop("id", None)
        data["name"] = self.name.strip()
        data["slug"] = self.slug
        for key in ("description", "length", "image_url", "name_en", "description_en"):
            data[key] = data[key] or None
        return data


class FleetAdmin:
    """Working set of boats for one admin session or request."""

    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.boats: List[Boat] = []

    async def load(self) -> None:
        self.boats = await run_action(
            self.gateway.list_boats(), "load boats", "Errore nel caricamento delle barche"
        )

    def filter(self, search: str = "") -> List[Boat]:
        """Match on boat name or the Italian type label."""
        term = (search or "").strip()
        return [
            b
            for b in self.boats
            if contains_ci(b.name, term) or contains_ci(BOAT_TYPE_LABELS[b.type], term)
        ]

    async def _check_slug(self, draft: BoatDraft) -> None:
        slug = draft.slug
        if not slug:
            raise DraftValidationError(NAME_REQUIRED)
        existing = await run_action(self.gateway.get_boat_by_slug(slug), "check slug", SAVE_FAILED)
        if existing is not None and existing.id != draft.id:
            raise DraftValidationError(DUPLICATE_SLUG)

    async def save(self, draft: BoatDraft) -> ActionResult[Boat]:
        """Commit the whole draft; the slug is regenerated from the name."""
        if blank(draft.name):
            raise DraftValidationError(NAME_REQUIRED)
        await self._check_slug(draft)
        payload = draft.to_payload()
        if draft.id:
            saved = await run_action(
                self.gateway.update_boat(draft.id, payload), "update boat", SAVE_FAILED
            )
            self.boats = [saved if b.id == saved.id else b for b in self.boats]
            message = "Barca aggiornata con successo"
        else:
            saved = await run_action(self.gateway.create_boat(payload), "create boat", SAVE_FAILED)
            self.boats = [saved, *self.boats]
            message = "Barca aggiunta con successo"
        logger.info("%s: %s (%s)", message, saved.name, saved.slug)
        return ActionResult(message=message, record=saved)

    async def delete(self, boat_id: UUID) -> ActionResult[Boat]:
        await run_action(self.gateway.delete_boat(boat_id), "delete boat", DELETE_FAILED)
        self.boats = [b for b in self.boats if b.id != boat_id]
        return ActionResult(message="Barca eliminata")

    async def upload_image(
        self, content: bytes, filename: str, content_type: Optional[str]
    ) -> str:
        """Upload a boat image and return its public URL."""
        try:
            return await self.gateway.upload_image(content, filename, content_type)
        except InvalidImageError as e:
            raise DraftValidationError(IMAGES_ONLY) from e
        except GatewayError as e:
            logger.error("Boat image upload failed: %s", e)
            raise ActionFailedError(UPLOAD_FAILED, action="upload image") from e

    async def upload_main_image(
        self, draft: BoatDraft, content: bytes, filename: str, content_type: Optional[str]
    ) -> ActionResult[str]:
        draft.image_url = await self.upload_image(content, filename, content_type)
        return ActionResult(message="Immagine caricata con successo", record=draft.image_url)

    async def upload_gallery_image(
        self, draft: BoatDraft, content: bytes, filename: str, content_type: Optional[str]
    ) -> ActionResult[str]:
        url = await self.upload_image(content, filename, content_type)
        draft.gallery_urls = [*draft.gallery_urls, url]
        return ActionResult(message="Immagine aggiunta alla galleria", record=url)
