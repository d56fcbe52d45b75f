"""Contrato assíncrono do Session Store Client.

Ponto único de acesso ao key-value store para sessões de chat. O contrato
é dono da convenção de chaves (chat:{user_id}) e do formato serializado
(JSON camelCase); o gerenciador de ciclo de vida nunca vê bytes crus.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import ValidationError

from chat_ttl.config.settings import SESSION_KEY_PREFIX
from chat_ttl.domain.keys import session_key
from chat_ttl.domain.models import ChatSession

# Contrato de TTL (mesmos valores do comando TTL do Redis)
TTL_NO_EXPIRY: int = -1
TTL_MISSING: int = -2


class SessionStoreError(Exception):
    """Erro ao persistir ou recuperar sessão."""


class StoreUnavailableError(SessionStoreError):
    """Store inacessível após esgotar retries com backoff."""


class MalformedSessionError(SessionStoreError):
    """Valor armazenado não é uma sessão válida (dado corrompido)."""

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"Stored session for '{user_id}' is malformed: {reason}")
        self.user_id = user_id


def validate_ttl(ttl_seconds: int) -> int:
    """Garante TTL inteiro positivo (EX do Redis não aceita 0 ou negativo)."""
    if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int) or ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds deve ser inteiro positivo, recebido: {ttl_seconds!r}")
    return ttl_seconds


def encode_session(session: ChatSession) -> str:
    """Serializa sessão para o valor gravado no store."""
    return session.to_json()


def decode_session(user_id: str, payload: str | bytes) -> ChatSession:
    """Desserializa valor do store.

    Raises:
        MalformedSessionError: Se o payload não for uma sessão válida
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedSessionError(user_id, "invalid utf-8") from e

    try:
        return ChatSession.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedSessionError(user_id, f"{e.error_count()} validation error(s)") from e


class SessionStoreClient(ABC):
    """Contrato abstrato para armazenamento de ChatSession com TTL.

    Responsabilidades:
    - Ler/gravar sessão na chave derivada de user_id
    - Toda escrita define TTL (sobrescreve valor e reinicia a contagem)
    - Expor TTL restante com a semântica -2/-1/>=0
    - Falhas de conexão viram StoreUnavailableError
    """

    def __init__(self, key_prefix: str = SESSION_KEY_PREFIX) -> None:
        self._key_prefix = key_prefix

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    def key_for(self, user_id: str) -> str:
        """Chave de armazenamento da sessão de user_id."""
        return session_key(user_id, self._key_prefix)

    @abstractmethod
    async def get(self, user_id: str) -> ChatSession | None:
        """Carrega sessão; None se a chave não existe.

        Raises:
            StoreUnavailableError: Store inacessível
            MalformedSessionError: Valor armazenado corrompido
        """
        ...

    @abstractmethod
    async def set_with_expiry(self, user_id: str, session: ChatSession, ttl_seconds: int) -> None:
        """Grava sessão incondicionalmente com TTL em segundos.

        Não soma ao TTL anterior: a contagem recomeça de ttl_seconds.
        """
        ...

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        """True se a chave da sessão existe."""
        ...

    @abstractmethod
    async def time_to_live(self, user_id: str) -> int:
        """Segundos restantes; -1 sem expiração, -2 chave inexistente."""
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Remove a sessão; idempotente."""
        ...

    async def close(self) -> None:
        """Libera a conexão subjacente (no-op por padrão)."""
        return None
