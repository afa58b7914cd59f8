"""Chat relay: forwards visitor messages to the configured automation webhook."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import Settings, get_settings
from .dependencies import get_http_client
from .limits import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

CHAT_SOURCE = "web"
CONFIG_ERROR_MESSAGE = "Errore configurazione server. Contattare l'amministratore."
RELAY_ERROR_MESSAGE = "Si è verificato un errore durante la comunicazione con l'assistente."


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``."""

    message: str
    sessionId: str


class ChatRelayError(Exception):
    """Relay failure carrying the fixed text shown to the visitor."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ChatRelay:
    """Stateless forwarder to the chat automation webhook.

    The upstream JSON body is returned unchanged on success.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        webhook_url: Optional[str],
        timeout: float = 30.0,
    ):
        self.client = client
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def relay(self, message: str, session_id: str) -> Any:
        if not self.webhook_url:
            logger.error("Chat webhook URL is not configured")
            raise ChatRelayError(CONFIG_ERROR_MESSAGE)

        payload: Dict[str, str] = {
            "message": message,
            "sessionId": session_id,
            "source": CHAT_SOURCE,
        }
        try:
            response = await self.client.post(self.webhook_url, json=payload, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.error("Chat webhook request failed: %s", e)
            raise ChatRelayError(RELAY_ERROR_MESSAGE) from e

        if not response.is_success:
            logger.error("Chat webhook returned status %s", response.status_code)
            raise ChatRelayError(RELAY_ERROR_MESSAGE)

        try:
            return response.json()
        except ValueError as e:
            logger.error("Chat webhook returned a non-JSON body: %s", e)
            raise ChatRelayError(RELAY_ERROR_MESSAGE) from e


def get_chat_relay(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ChatRelay:
    return ChatRelay(client, settings.chat_webhook_url, settings.chat_timeout_seconds)


@router.post("/chat")
@limiter.limit(lambda: get_settings().chat_rate_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    relay: ChatRelay = Depends(get_chat_relay),
):
    """Relay one chat message and return the assistant's reply as received."""
    try:
        reply = await relay.relay(body.message, body.sessionId)
    except ChatRelayError as e:
        return JSONResponse({"message": e.message}, status_code=e.status_code)
    logger.debug("Chat reply relayed for session %s", body.sessionId)
    return JSONResponse(reply)
