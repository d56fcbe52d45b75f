"""Implementação de SessionStoreClient em memória (apenas dev/testes).

⚠️ Não usar em produção!
- Não persiste entre restarts
- Não é compartilhado entre processos
- Não emite notificações de expiração (o listener não roda com este backend)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from chat_ttl.config.settings import SESSION_KEY_PREFIX
from chat_ttl.infra.session_contract import (
    TTL_MISSING,
    SessionStoreClient,
    decode_session,
    encode_session,
    validate_ttl,
)
from chat_ttl.observability.logging import get_logger

if TYPE_CHECKING:
    from chat_ttl.domain.models import ChatSession

logger: logging.Logger = get_logger(__name__)


class InMemorySessionStoreClient(SessionStoreClient):
    """Armazena (payload JSON, expire_at) por chave com relógio injetável."""

    def __init__(
        self,
        key_prefix: str = SESSION_KEY_PREFIX,
        clock: Callable[[], float] | None = None,
        sweep_interval: int = 100,
    ) -> None:
        super().__init__(key_prefix)
        self._entries: dict[str, tuple[str, float]] = {}
        self._clock = clock or time.monotonic
        self._sweep_interval = max(sweep_interval, 1)
        self._writes = 0

    def _live_entry(self, key: str) -> tuple[str, float] | None:
        """Retorna a entrada se ainda viva; remove se expirou (expiração lazy)."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry[1]:
            del self._entries[key]
            logger.debug("Session expired (in-memory)", extra={"key": key})
            return None

        return entry

    def _purge_expired(self) -> int:
        """Remove entradas expiradas de usuários que não voltaram."""
        now = self._clock()
        expired = [key for key, (_, expire_at) in self._entries.items() if now >= expire_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Expired sessions purged (in-memory)", extra={"count": len(expired)})
        return len(expired)

    async def get(self, user_id: str) -> ChatSession | None:
        entry = self._live_entry(self.key_for(user_id))
        if entry is None:
            logger.debug("Session not found (in-memory)", extra={"user_id": user_id})
            return None
        return decode_session(user_id, entry[0])

    async def set_with_expiry(self, user_id: str, session: ChatSession, ttl_seconds: int) -> None:
        validate_ttl(ttl_seconds)
        expire_at = self._clock() + ttl_seconds
        self._entries[self.key_for(user_id)] = (encode_session(session), expire_at)

        self._writes += 1
        if self._writes % self._sweep_interval == 0:
            self._purge_expired()

        logger.debug(
            "Session saved (in-memory)",
            extra={"user_id": user_id, "ttl_seconds": ttl_seconds},
        )

    async def exists(self, user_id: str) -> bool:
        return self._live_entry(self.key_for(user_id)) is not None

    async def time_to_live(self, user_id: str) -> int:
        entry = self._live_entry(self.key_for(user_id))
        if entry is None:
            return TTL_MISSING
        # Arredonda como o Redis (TTL em ms convertido para segundos)
        return int(entry[1] - self._clock() + 0.5)

    async def delete(self, user_id: str) -> None:
        if self._entries.pop(self.key_for(user_id), None) is not None:
            logger.debug("Session deleted (in-memory)", extra={"user_id": user_id})
