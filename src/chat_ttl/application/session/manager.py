"""ChatSessionManager: ciclo de vida de sessões de chat com TTL.

Estados por user_id: ABSENT e ACTIVE.
- ABSENT → ACTIVE: create_or_refresh
- ACTIVE → ACTIVE (TTL reiniciado): create_or_refresh, append_message
- ACTIVE → ABSENT: end (explícito) ou expiração do TTL (observada apenas
  pelo ExpirationListener, nunca por este gerenciador)

append_message em ABSENT é erro, não transição.

Limitação conhecida: create_or_refresh e append_message fazem
read-modify-write em dois comandos (GET + SET) sem lock. Chamadas
concorrentes para o mesmo user_id podem perder uma atualização
(last-write-wins do store).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from chat_ttl.application.errors import SessionNotFoundError
from chat_ttl.config.settings import DEFAULT_SESSION_TTL_SECONDS
from chat_ttl.domain.enums import MessageSender, SessionStatusLabel
from chat_ttl.domain.models import ChatSession, SessionRefresh, SessionStatus
from chat_ttl.infra.session_contract import SessionStoreClient, validate_ttl
from chat_ttl.observability.logging import get_logger


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class ChatSessionManager:
    """Operações de domínio sobre sessões, com política fixa de TTL."""

    def __init__(
        self,
        store: SessionStoreClient,
        *,
        default_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._default_ttl = validate_ttl(default_ttl_seconds)
        self._clock = clock or _utcnow
        self._logger = logger or get_logger(__name__)

    @property
    def default_ttl_seconds(self) -> int:
        return self._default_ttl

    def _resolve_ttl(self, ttl_seconds: int | None) -> int:
        return self._default_ttl if ttl_seconds is None else validate_ttl(ttl_seconds)

    async def create_or_refresh(
        self, user_id: str, ttl_seconds: int | None = None
    ) -> SessionRefresh:
        """Cria sessão nova ou atualiza updated_at da existente.

        Sempre regrava com o TTL informado: cada chamada reinicia a
        contagem de inatividade. Chave ausente significa sessão nova com
        histórico vazio (não há "retomada" de sessão expirada).
        """
        ttl = self._resolve_ttl(ttl_seconds)
        now = self._clock()

        session = await self._store.get(user_id)
        if session is None:
            session = ChatSession.start(user_id, now)
            self._logger.info(
                "Chat session created", extra={"user_id": user_id, "ttl_seconds": ttl}
            )
        else:
            session.touch(now)
            self._logger.debug(
                "Chat session refreshed", extra={"user_id": user_id, "ttl_seconds": ttl}
            )

        await self._store.set_with_expiry(user_id, session, ttl)
        return SessionRefresh(user_id=user_id, key=self._store.key_for(user_id), expires_in=ttl)

    async def register_activity(self, user_id: str) -> SessionRefresh:
        """Atividade do usuário: refresh com o TTL padrão."""
        return await self.create_or_refresh(user_id, self._default_ttl)

    async def append_message(
        self,
        user_id: str,
        sender: MessageSender | str,
        content: str,
        ttl_seconds: int | None = None,
    ) -> ChatSession:
        """Anexa mensagem à sessão ativa e reinicia o TTL.

        Raises:
            SessionNotFoundError: Sessão ausente/expirada (nada é gravado)
            ValueError: Remetente ou TTL inválido
        """
        ttl = self._resolve_ttl(ttl_seconds)
        sender = MessageSender(sender)

        session = await self._store.get(user_id)
        if session is None:
            self._logger.info("Append rejected: no active session", extra={"user_id": user_id})
            raise SessionNotFoundError(user_id)

        message = session.append(sender, content, self._clock())
        await self._store.set_with_expiry(user_id, session, ttl)

        self._logger.debug(
            "Message appended",
            extra={
                "user_id": user_id,
                "message_id": message.id,
                "sender": sender.value,
                "message_count": len(session.messages),
            },
        )
        return session

    async def status(self, user_id: str) -> SessionStatus:
        """Consulta somente leitura; não reinicia o TTL."""
        is_active = await self._store.exists(user_id)
        ttl = await self._store.time_to_live(user_id)

        return SessionStatus(
            user_id=user_id,
            is_active=is_active,
            time_remaining=max(ttl, 0),
            status=SessionStatusLabel.ACTIVE if is_active else SessionStatusLabel.EXPIRED,
        )

    async def end(self, user_id: str) -> None:
        """Encerra a sessão manualmente; idempotente."""
        await self._store.delete(user_id)
        self._logger.info("Chat session ended manually", extra={"user_id": user_id})
