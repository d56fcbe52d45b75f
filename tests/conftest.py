from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from chat_ttl.api.app import create_app
from chat_ttl.application.session.manager import ChatSessionManager
from chat_ttl.config.settings import Settings, get_settings
from chat_ttl.infra.session_store_memory import InMemorySessionStoreClient


class FakeClock:
    """Relógio controlável: monotonic (store) e datetime UTC (manager)."""

    def __init__(self, start: datetime | None = None) -> None:
        self._start = start or datetime(2026, 1, 15, 12, 0, tzinfo=UTC)
        self._elapsed = 0.0

    def monotonic(self) -> float:
        return self._elapsed

    def utcnow(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    def advance(self, seconds: float) -> None:
        self._elapsed += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def memory_store(clock: FakeClock) -> InMemorySessionStoreClient:
    return InMemorySessionStoreClient(clock=clock.monotonic)


@pytest.fixture()
def manager(memory_store: InMemorySessionStoreClient, clock: FakeClock) -> ChatSessionManager:
    return ChatSessionManager(memory_store, default_ttl_seconds=60, clock=clock.utcnow)


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SESSION_STORE_BACKEND", "memory")
    get_settings.cache_clear()
    app = create_app(Settings())
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()
