"""Implementação de SessionStoreClient usando Redis (produção)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from chat_ttl.config.settings import SESSION_KEY_PREFIX
from chat_ttl.infra.session_contract import (
    SessionStoreClient,
    SessionStoreError,
    StoreUnavailableError,
    decode_session,
    encode_session,
    validate_ttl,
)
from chat_ttl.observability.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from chat_ttl.domain.models import ChatSession

logger: logging.Logger = get_logger(__name__)


def _wrap_redis_error(operation: str, user_id: str, error: RedisError) -> SessionStoreError:
    """Converte erro do redis-py no erro tipado do store.

    O retry/backoff já foi aplicado pelo cliente; conexão/timeout que chegam
    aqui significam tentativas esgotadas.
    """
    logger.error(
        "Redis operation failed",
        extra={
            "operation": operation,
            "user_id": user_id,
            "error_type": type(error).__name__,
            "error": str(error),
        },
    )
    if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
        return StoreUnavailableError(f"Redis unavailable during {operation}: {error}")
    return SessionStoreError(f"Redis {operation} failed: {error}")


class RedisSessionStoreClient(SessionStoreClient):
    """Armazenamento em Redis com TTL nativo (SET key value EX ttl)."""

    def __init__(self, redis_client: Redis, key_prefix: str = SESSION_KEY_PREFIX) -> None:
        super().__init__(key_prefix)
        self._redis = redis_client

    async def get(self, user_id: str) -> ChatSession | None:
        key = self.key_for(user_id)
        try:
            payload = await self._redis.get(key)
        except RedisError as e:
            raise _wrap_redis_error("get", user_id, e) from e

        if payload is None:
            logger.debug("Session not found (Redis)", extra={"user_id": user_id})
            return None

        return decode_session(user_id, payload)

    async def set_with_expiry(self, user_id: str, session: ChatSession, ttl_seconds: int) -> None:
        validate_ttl(ttl_seconds)
        key = self.key_for(user_id)
        try:
            await self._redis.set(key, encode_session(session), ex=ttl_seconds)
        except RedisError as e:
            raise _wrap_redis_error("set", user_id, e) from e

        logger.debug(
            "Session saved (Redis)",
            extra={"user_id": user_id, "ttl_seconds": ttl_seconds},
        )

    async def exists(self, user_id: str) -> bool:
        try:
            return bool(await self._redis.exists(self.key_for(user_id)))
        except RedisError as e:
            raise _wrap_redis_error("exists", user_id, e) from e

    async def time_to_live(self, user_id: str) -> int:
        try:
            return int(await self._redis.ttl(self.key_for(user_id)))
        except RedisError as e:
            raise _wrap_redis_error("ttl", user_id, e) from e

    async def delete(self, user_id: str) -> None:
        try:
            deleted = await self._redis.delete(self.key_for(user_id))
        except RedisError as e:
            raise _wrap_redis_error("delete", user_id, e) from e

        if deleted:
            logger.debug("Session deleted (Redis)", extra={"user_id": user_id})

    async def close(self) -> None:
        """Fecha o pool de conexões após os comandos em andamento."""
        await self._redis.aclose()
        logger.info("Redis session store closed")
