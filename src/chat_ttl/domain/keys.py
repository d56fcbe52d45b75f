"""Convenção de chaves do namespace de sessões."""

from __future__ import annotations

from chat_ttl.config.settings import SESSION_KEY_PREFIX


def session_key(user_id: str, prefix: str = SESSION_KEY_PREFIX) -> str:
    """Deriva a chave de armazenamento da sessão (função pura de user_id)."""

    return f"{prefix}{user_id}"


def user_id_from_key(key: str, prefix: str = SESSION_KEY_PREFIX) -> str | None:
    """Extrai o user_id de uma chave; None se a chave não pertence ao namespace."""

    if not key.startswith(prefix):
        return None
    return key[len(prefix):]
