"""Tests for the chat relay using httpx's mock transport."""

from __future__ import annotations

import json

import httpx
import pytest

from yachtme.api.chat import (
    CONFIG_ERROR_MESSAGE,
    RELAY_ERROR_MESSAGE,
    ChatRelay,
    ChatRelayError,
)

WEBHOOK = "https://automation.test/webhook/chat"


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestChatRelay:
    @pytest.mark.asyncio
    async def test_reply_passed_through(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"output": "Ciao!", "extra": [1, 2]})

        async with _client(handler) as client:
            reply = await ChatRelay(client, WEBHOOK).relay("Quanto costa?", "s-1")

        assert reply == {"output": "Ciao!", "extra": [1, 2]}
        assert seen["url"] == WEBHOOK
        assert seen["body"] == {"message": "Quanto costa?", "sessionId": "s-1", "source": "web"}

    @pytest.mark.asyncio
    async def test_missing_webhook(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with _client(handler) as client:
            with pytest.raises(ChatRelayError) as exc:
                await ChatRelay(client, None).relay("ciao", "s-1")
        assert exc.value.message == CONFIG_ERROR_MESSAGE
        assert exc.value.status_code == 500

    @pytest.mark.asyncio
    async def test_upstream_error_status(self):
        async with _client(lambda r: httpx.Response(502, text="bad gateway")) as client:
            with pytest.raises(ChatRelayError) as exc:
                await ChatRelay(client, WEBHOOK).relay("ciao", "s-1")
        assert exc.value.message == RELAY_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(ChatRelayError) as exc:
                await ChatRelay(client, WEBHOOK, timeout=0.1).relay("ciao", "s-1")
        assert exc.value.message == RELAY_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with _client(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ChatRelayError):
                await ChatRelay(client, WEBHOOK).relay("ciao", "s-1")
