"""Camada de infraestrutura: acesso ao Redis e listener de expiração.

Uso típico:
    from chat_ttl.infra import create_redis_client, create_session_store
"""

from chat_ttl.infra.expiration_listener import (
    ExpirationListener,
    expired_channel,
    log_session_expired,
)
from chat_ttl.infra.redis_client import create_redis_client
from chat_ttl.infra.session_contract import (
    MalformedSessionError,
    SessionStoreClient,
    SessionStoreError,
    StoreUnavailableError,
)
from chat_ttl.infra.session_store import create_session_store
from chat_ttl.infra.session_store_memory import InMemorySessionStoreClient
from chat_ttl.infra.session_store_redis import RedisSessionStoreClient

__all__ = [
    "ExpirationListener",
    "InMemorySessionStoreClient",
    "MalformedSessionError",
    "RedisSessionStoreClient",
    "SessionStoreClient",
    "SessionStoreError",
    "StoreUnavailableError",
    "create_redis_client",
    "create_session_store",
    "expired_channel",
    "log_session_expired",
]
