"""Cenários de expiração contra um Redis real.

Executado apenas com CHAT_TTL_TEST_REDIS_URL definido (ex.: redis://localhost:6379/0);
CHAT_TTL_TEST_REDIS_DB deve apontar para o mesmo banco da URL.
"""

from __future__ import annotations

import asyncio
import os
import uuid

import pytest

from chat_ttl.application.errors import SessionNotFoundError
from chat_ttl.application.runtime import ChatTTLRuntime
from chat_ttl.config.settings import Settings

REDIS_URL = os.getenv("CHAT_TTL_TEST_REDIS_URL")

pytestmark = pytest.mark.skipif(not REDIS_URL, reason="CHAT_TTL_TEST_REDIS_URL não definido")


def _settings() -> Settings:
    db = int(os.getenv("CHAT_TTL_TEST_REDIS_DB", "0"))
    return Settings(
        session_store_backend="redis",
        redis_url=REDIS_URL,
        redis_db=db,
        session_key_prefix=f"chat-test-{uuid.uuid4().hex[:8]}:",
        listener_poll_timeout_seconds=0.1,
    )


@pytest.mark.asyncio
async def test_short_ttl_expires_and_dispatches_once() -> None:
    expired: list[str] = []
    async with ChatTTLRuntime(_settings(), expiration_handler=expired.append) as manager:
        await manager.create_or_refresh("u1", 2)

        status = await manager.status("u1")
        assert status.is_active is True
        assert status.time_remaining <= 2

        await asyncio.sleep(3)

        status = await manager.status("u1")
        assert status.is_active is False
        assert status.time_remaining == 0
        assert status.status == "expired"

        # Redis remove chaves expiradas de forma lazy/ativa; aguarda o evento
        for _ in range(50):
            if expired:
                break
            await asyncio.sleep(0.1)

    assert expired == ["u1"]


@pytest.mark.asyncio
async def test_append_on_fresh_user_creates_nothing() -> None:
    async with ChatTTLRuntime(_settings()) as manager:
        with pytest.raises(SessionNotFoundError):
            await manager.append_message("u2", "user", "hi", 60)

        assert (await manager.status("u2")).is_active is False


@pytest.mark.asyncio
async def test_end_is_idempotent() -> None:
    async with ChatTTLRuntime(_settings()) as manager:
        await manager.create_or_refresh("u3", 60)
        await manager.end("u3")
        await manager.end("u3")

        status = await manager.status("u3")
        assert (status.is_active, status.time_remaining) == (False, 0)
