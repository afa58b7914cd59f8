"""Key/value site configuration and the keys read by convention."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class SiteSetting(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    key: str
    value: Optional[str] = None
    updated_at: Optional[datetime] = None


# Branding and contact keys
SITE_NAME = "site_name"
SITE_TAGLINE = "site_tagline"
CONTACT_EMAIL = "contact_email"
CONTACT_PHONE = "contact_phone"
CONTACT_PHONE_2 = "contact_phone_2"
CONTACT_ADDRESS = "contact_address"
CONTACT_HOURS = "contact_hours"
SOCIAL_FACEBOOK = "social_facebook"
SOCIAL_INSTAGRAM = "social_instagram"
SOCIAL_WHATSAPP = "social_whatsapp"
SITE_THEME = "site_theme"

# Hero and section images
HERO_IMAGE = "hero_image"
FLEET_HERO_IMAGE = "fleet_hero_image"
CONTACT_HERO_IMAGE = "contact_hero_image"
SERVICES_HERO_IMAGE = "services_hero_image"
ABOUT_SECTION_IMAGE = "about_section_image"

IMAGE_SETTINGS: List[str] = [
    HERO_IMAGE,
    FLEET_HERO_IMAGE,
    CONTACT_HERO_IMAGE,
    SERVICES_HERO_IMAGE,
    ABOUT_SECTION_IMAGE,
]

SETTING_LABELS: Dict[str, str] = {
    HERO_IMAGE: "Homepage Hero",
    FLEET_HERO_IMAGE: "Pagina Flotta",
    CONTACT_HERO_IMAGE: "Pagina Contatti",
    SERVICES_HERO_IMAGE: "Pagina Servizi",
    ABOUT_SECTION_IMAGE: "Chi Siamo",
    SITE_NAME: "Nome Sito",
    SITE_TAGLINE: "Slogan",
    CONTACT_EMAIL: "Email",
    CONTACT_PHONE: "Tel 1",
    CONTACT_PHONE_2: "Tel 2",
    CONTACT_ADDRESS: "Indirizzo",
    CONTACT_HOURS: "Orari",
    SOCIAL_FACEBOOK: "Facebook",
    SOCIAL_INSTAGRAM: "Instagram",
    SOCIAL_WHATSAPP: "WhatsApp",
}


class Theme(str, Enum):
    NAVY = "navy"
    WHITE = "white"
    SILVER = "silver"
    GOLD = "gold"


DEFAULT_THEME = Theme.NAVY

THEME_LABELS: Dict[Theme, str] = {
    Theme.NAVY: "Navy",
    Theme.WHITE: "White",
    Theme.SILVER: "Silver",
    Theme.GOLD: "Gold",
}
