"""Fixed-catalog service offerings (skipper, aperitivo, events, tours)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from .base import pick_localized, pick_localized_list, utcnow


class ServiceIcon(str, Enum):
    """Icons available to the public services page."""

    USER = "User"
    WINE = "Wine"
    PARTY_POPPER = "PartyPopper"
    COMPASS = "Compass"
    ANCHOR = "Anchor"


SERVICE_ICON_LABELS: Dict[ServiceIcon, str] = {
    ServiceIcon.USER: "Skipper",
    ServiceIcon.WINE: "Aperitivo",
    ServiceIcon.PARTY_POPPER: "Eventi",
    ServiceIcon.COMPASS: "Tour",
    ServiceIcon.ANCHOR: "Ancora",
}


class ServiceFields(BaseModel):
    """Editable service attributes."""

    name: str = ""
    name_en: Optional[str] = None
    slug: str = ""
    description: Optional[str] = None
    description_en: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    features_en: List[str] = Field(default_factory=list)
    price_text: Optional[str] = None
    price_text_en: Optional[str] = None
    icon: ServiceIcon = ServiceIcon.ANCHOR
    image_url: Optional[str] = None
    display_order: int = 0
    is_active: bool = True

    @field_validator("features", "features_en", mode="before")
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v

    @field_validator("icon", mode="before")
    @classmethod
    def _unknown_icon(cls, v):
        # Icons removed from the set render as the anchor
        if v not in ServiceIcon._value2member_map_ and not isinstance(v, ServiceIcon):
            return ServiceIcon.ANCHOR
        return v


class Service(ServiceFields):
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def localized(self, locale: str) -> "LocalizedService":
        return LocalizedService(
            id=self.id,
            slug=self.slug,
            name=pick_localized(self.name, self.name_en, locale),
            description=pick_localized(self.description, self.description_en, locale),
            features=pick_localized_list(self.features, self.features_en, locale),
            price_text=pick_localized(self.price_text, self.price_text_en, locale),
            icon=self.icon,
            image_url=self.image_url,
            display_order=self.display_order,
        )


class LocalizedService(BaseModel):
    id: UUID
    slug: str
    name: str
    description: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    price_text: Optional[str] = None
    icon: ServiceIcon
    image_url: Optional[str] = None
    display_order: int = 0
