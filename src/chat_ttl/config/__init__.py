"""Configurações centralizadas do chat_ttl.

Uso típico:
    from chat_ttl.config import get_settings
"""

from chat_ttl.config.settings import (
    DEFAULT_SESSION_TTL_SECONDS,
    KEYSPACE_NOTIFICATION_FLAGS,
    SESSION_KEY_PREFIX,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "SESSION_KEY_PREFIX",
    "DEFAULT_SESSION_TTL_SECONDS",
    "KEYSPACE_NOTIFICATION_FLAGS",
]
