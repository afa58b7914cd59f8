"""Site settings administration: grouped key/value editing and hero image uploads."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.site_setting import IMAGE_SETTINGS, SETTING_LABELS, SITE_THEME, SiteSetting
from ..storage.base import CatalogGateway, GatewayError, InvalidImageError
from .base import LOAD_FAILED, ActionResult, run_action
from .errors import ActionFailedError, DraftValidationError

logger = logging.getLogger(__name__)


class SettingEntry(BaseModel):
    key: str
    label: str
    value: str = ""


class SettingsGroups(BaseModel):
    images: List[SettingEntry] = Field(default_factory=list)
    site: List[SettingEntry] = Field(default_factory=list)
    contact: List[SettingEntry] = Field(default_factory=list)
    social: List[SettingEntry] = Field(default_factory=list)


class SettingsAdmin:
    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.settings: List[SiteSetting] = []

    async def load(self) -> None:
        self.settings = await run_action(self.gateway.list_settings(), "load settings", LOAD_FAILED)

    def value(self, key: str) -> str:
        return next((s.value or "" for s in self.settings if s.key == key), "")

    def groups(self) -> SettingsGroups:
        """Split stored settings into the images, site, contact and social panels."""
        groups = SettingsGroups()
        for s in self.settings:
            entry = SettingEntry(key=s.key, label=SETTING_LABELS.get(s.key, s.key), value=s.value or "")
            if s.key in IMAGE_SETTINGS:
                groups.images.append(entry)
            elif s.key.startswith("site_") and s.key != SITE_THEME:
                groups.site.append(entry)
            elif s.key.startswith("contact_"):
                groups.contact.append(entry)
            elif s.key.startswith("social_"):
                groups.social.append(entry)
        return groups

    def _set_local(self, key: str, value: str) -> None:
        for i, s in enumerate(self.settings):
            if s.key == key:
                self.settings[i] = s.model_copy(update={"value": value})
                return
        self.settings.append(SiteSetting(key=key, value=value))

    async def save(self, key: str, value: str) -> ActionResult[str]:
        await run_action(self.gateway.update_setting(key, value), "update setting", "Errore")
        self._set_local(key, value)
        return ActionResult(message="Salvato", record=value)

    async def save_many(self, changes: Dict[str, str]) -> ActionResult[Dict[str, str]]:
        for key, value in changes.items():
            await self.save(key, value)
        return ActionResult(message="Salvato", record=dict(changes))

    async def upload_image(
        self, key: str, content: bytes, filename: str, content_type: Optional[str]
    ) -> ActionResult[str]:
        """Upload a hero/section image and point the setting at its public URL."""
        if key not in IMAGE_SETTINGS:
            raise DraftValidationError(f"Impostazione non valida: {key}")
        try:
            url = await self.gateway.upload_site_image(content, filename, content_type, key)
            await self.gateway.update_setting(key, url)
        except InvalidImageError as e:
            raise DraftValidationError("Solo immagini") from e
        except GatewayError as e:
            logger.error("Upload for setting %s failed: %s", key, e)
            raise ActionFailedError("Errore upload", action="upload site image") from e
        self._set_local(key, url)
        return ActionResult(message="Caricata", record=url)
