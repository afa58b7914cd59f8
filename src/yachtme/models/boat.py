"""Boat inventory models."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import pick_localized, utcnow

logger = logging.getLogger(__name__)


class BoatType(str, Enum):
    """Charter categories offered by the fleet."""

    MOTOR_YACHT_20M = "motor_yacht_20m"
    SAILBOAT_14M = "sailboat_14m"
    DINGHY = "dinghy"
    JETSKI = "jetski"


BOAT_TYPE_LABELS: Dict[BoatType, str] = {
    BoatType.MOTOR_YACHT_20M: "Motor Yacht 20m",
    BoatType.SAILBOAT_14M: "Barca a Vela 14m",
    BoatType.DINGHY: "Gommone",
    BoatType.JETSKI: "Moto d'Acqua",
}


class ExtraServiceUnit(str, Enum):
    """Pricing unit of an optional extra."""

    DAY = "day"
    TRIP = "trip"
    PERSON = "person"


class ExtraService(BaseModel):
    """Optional paid add-on for a boat (fuel, skipper, catering...)."""

    name: str
    price: float = Field(ge=0)
    unit: ExtraServiceUnit = ExtraServiceUnit.DAY


class LocationCoords(BaseModel):
    lat: float
    lng: float


class BoatFeatures(BaseModel):
    """Closed set of amenity flags and counts.

    Unknown keys are rejected when building a model from user input. Rows read
    from the datastore go through ``from_stored`` which drops them instead.
    """

    model_config = ConfigDict(extra="forbid")

    # Base
    crew: Optional[bool] = None
    cabins: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    license_required: Optional[bool] = None

    # Navigation and safety
    gps: Optional[bool] = None
    autopilot: Optional[bool] = None
    radar: Optional[bool] = None
    vhf_radio: Optional[bool] = None
    life_jackets: Optional[bool] = None

    # Comfort
    air_conditioning: Optional[bool] = None
    wifi: Optional[bool] = None
    generator: Optional[bool] = None
    watermaker: Optional[bool] = None
    heating: Optional[bool] = None

    # Entertainment
    tv: Optional[bool] = None
    stereo: Optional[bool] = None
    swimming_platform: Optional[bool] = None
    tender: Optional[bool] = None
    snorkeling_equipment: Optional[bool] = None

    @classmethod
    def from_stored(cls, data: Optional[Dict[str, Any]]) -> "BoatFeatures":
        """Build features from a stored JSON map, ignoring unknown keys."""
        data = data or {}
        known = {k: v for k, v in data.items() if k in cls.model_fields}
        unknown = sorted(set(data) - set(known))
        if unknown:
            logger.warning("Dropping unknown boat feature keys: %s", ", ".join(unknown))
        return cls(**known)

    def to_map(self) -> Dict[str, Any]:
        """Stored representation: only keys that were set."""
        return self.model_dump(exclude_none=True)

    def enabled(self, key: str) -> bool:
        return bool(getattr(self, key, None))


class FeatureCategory(BaseModel):
    """Display group of boolean amenities."""

    key: str
    label: str
    features: List[Dict[str, str]]


FEATURE_CATEGORIES: List[FeatureCategory] = [
    FeatureCategory(
        key="navigation",
        label="Navigazione e Sicurezza",
        features=[
            {"key": "gps", "label": "Navigatore/GPS"},
            {"key": "autopilot", "label": "Autopilota"},
            {"key": "radar", "label": "Radar"},
            {"key": "vhf_radio", "label": "Radio VHF"},
            {"key": "life_jackets", "label": "Giubbotti Salvagente"},
        ],
    ),
    FeatureCategory(
        key="comfort",
        label="Comfort",
        features=[
            {"key": "air_conditioning", "label": "Aria Condizionata"},
            {"key": "heating", "label": "Riscaldamento"},
            {"key": "wifi", "label": "WiFi"},
            {"key": "generator", "label": "Generatore"},
            {"key": "watermaker", "label": "Dissalatore"},
        ],
    ),
    FeatureCategory(
        key="entertainment",
        label="Intrattenimento",
        features=[
            {"key": "tv", "label": "TV"},
            {"key": "stereo", "label": "Stereo/Musica"},
            {"key": "swimming_platform", "label": "Piattaforma Bagno"},
            {"key": "tender", "label": "Tender"},
            {"key": "snorkeling_equipment", "label": "Attrezzatura Snorkeling"},
        ],
    ),
]

# Keys that can be flipped with a toggle (everything except the counts)
TOGGLE_FEATURE_KEYS = {
    name
    for name in BoatFeatures.model_fields
    if name not in ("cabins", "bathrooms")
}


class BoatFields(BaseModel):
    """Editable boat attributes, shared by stored boats and admin drafts."""

    name: str = ""
    name_en: Optional[str] = None
    type: BoatType = BoatType.DINGHY
    description: Optional[str] = None
    description_en: Optional[str] = None
    price_full_day: Optional[float] = Field(default=None, ge=0)
    price_half_day: Optional[float] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=0)
    length: Optional[str] = None
    image_url: Optional[str] = None
    gallery_urls: List[str] = Field(default_factory=list)
    features: BoatFeatures = Field(default_factory=BoatFeatures)
    is_featured: bool = False

    # Provenance and details
    year: Optional[int] = None
    refurbished_year: Optional[int] = None
    location: Optional[str] = None
    location_coords: Optional[LocationCoords] = None
    highlights: List[str] = Field(default_factory=list)
    included_services: List[str] = Field(default_factory=list)
    excluded_services: List[str] = Field(default_factory=list)
    extra_services: List[ExtraService] = Field(default_factory=list)
    cancellation_policy: Optional[str] = None
    engine_power: Optional[str] = None
    fuel_consumption: Optional[str] = None

    @field_validator("gallery_urls", "highlights", "included_services", "excluded_services", mode="before")
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v

    @field_validator("extra_services", mode="before")
    @classmethod
    def _null_extras(cls, v):
        return [] if v is None else v


class Boat(BoatFields):
    """A boat available for charter."""

    id: UUID = Field(default_factory=uuid4)
    slug: str
    created_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="before")
    @classmethod
    def _lenient_features(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("features"), dict):
            data = dict(data)
            data["features"] = BoatFeatures.from_stored(data["features"])
        return data

    @property
    def type_label(self) -> str:
        return BOAT_TYPE_LABELS[self.type]

    def localized(self, locale: str) -> "LocalizedBoat":
        """Project bilingual fields onto the requested locale."""
        return LocalizedBoat(
            **self.model_dump(exclude={"name", "name_en", "description", "description_en"}),
            name=pick_localized(self.name, self.name_en, locale),
            description=pick_localized(self.description, self.description_en, locale),
            type_label=self.type_label,
        )


class LocalizedBoat(BaseModel):
    """Boat as shown to visitors in one locale."""

    id: UUID
    slug: str
    name: str
    description: Optional[str] = None
    type: BoatType
    type_label: str
    price_full_day: Optional[float] = None
    price_half_day: Optional[float] = None
    capacity: Optional[int] = None
    length: Optional[str] = None
    image_url: Optional[str] = None
    gallery_urls: List[str] = Field(default_factory=list)
    features: BoatFeatures = Field(default_factory=BoatFeatures)
    is_featured: bool = False
    year: Optional[int] = None
    refurbished_year: Optional[int] = None
    location: Optional[str] = None
    location_coords: Optional[LocationCoords] = None
    highlights: List[str] = Field(default_factory=list)
    included_services: List[str] = Field(default_factory=list)
    excluded_services: List[str] = Field(default_factory=list)
    extra_services: List[ExtraService] = Field(default_factory=list)
    cancellation_policy: Optional[str] = None
    engine_power: Optional[str] = None
    fuel_consumption: Optional[str] = None
    created_at: Optional[datetime] = None
