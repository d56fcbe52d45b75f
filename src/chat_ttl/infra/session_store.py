"""Factory de SessionStoreClient conforme backend configurado."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chat_ttl.config.settings import SESSION_KEY_PREFIX
from chat_ttl.infra.session_contract import SessionStoreClient
from chat_ttl.infra.session_store_memory import InMemorySessionStoreClient
from chat_ttl.infra.session_store_redis import RedisSessionStoreClient
from chat_ttl.observability.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger: logging.Logger = get_logger(__name__)


def create_session_store(
    backend: str,
    client: Redis | None = None,
    key_prefix: str = SESSION_KEY_PREFIX,
    **kwargs: Any,
) -> SessionStoreClient:
    """Factory para SessionStoreClient.

    Args:
        backend: "redis" ou "memory"
        client: Cliente Redis assíncrono (obrigatório se backend="redis")
        key_prefix: Namespace das chaves de sessão
        **kwargs: Repassados ao InMemorySessionStoreClient (ex.: clock)

    Raises:
        ValueError: Se backend inválido ou cliente Redis ausente
    """
    backend = backend.lower()

    if backend == "memory":
        logger.warning("Using in-memory session store (dev only)")
        return InMemorySessionStoreClient(key_prefix=key_prefix, **kwargs)

    if backend == "redis":
        if client is None:
            raise ValueError("client required for redis backend")
        logger.info("Using Redis session store")
        return RedisSessionStoreClient(client, key_prefix=key_prefix)

    raise ValueError(f"Unknown session store backend: {backend}")
