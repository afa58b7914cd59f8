"""Admin action failures carrying the user-facing (Italian) notification text."""

from __future__ import annotations

from typing import Optional


class AdminError(Exception):
    """Base class; ``message`` is shown to staff as-is."""

    def __init__(self, message: str, action: Optional[str] = None):
        self.message = message
        self.action = action
        super().__init__(message)


class DraftValidationError(AdminError):
    """Required fields missing; raised before any gateway call."""


class ActionFailedError(AdminError):
    """The gateway call failed; local state was left unchanged."""


class TransitionNotAllowedError(AdminError):
    """Status change not offered from the booking's current status."""


class RecordNotFoundError(AdminError):
    """The addressed record does not exist (anymore)."""
