"""Helpers shared by the admin workspaces."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Generic, Optional, TypeVar

from pydantic import BaseModel

from ..storage.base import BookingConflictError, GatewayError
from .errors import ActionFailedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOAD_FAILED = "Errore nel caricamento dati"
REQUIRED_FIELDS = "Compila tutti i campi obbligatori"
SAVE_FAILED = "Errore nel salvataggio"
UPDATE_FAILED = "Errore nell'aggiornamento"
DELETE_FAILED = "Errore nell'eliminazione"


class ActionResult(BaseModel, Generic[T]):
    """Outcome of a successful admin action plus its notification text."""

    message: str
    record: Optional[T] = None


async def run_action(call: Awaitable[Any], action: str, failure_message: str) -> Any:
    """Await a gateway call, turning provider failures into ActionFailedError.

    Booking conflicts are a business outcome and propagate unchanged.
    """
    try:
        return await call
    except BookingConflictError:
        raise
    except GatewayError as e:
        logger.error("Admin action %s failed: %s", action, e)
        raise ActionFailedError(failure_message, action=action) from e


def blank(value: Optional[str]) -> bool:
    return not (value or "").strip()
