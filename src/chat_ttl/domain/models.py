"""Models de sessão de chat: ChatSession e ChatMessage.

Uma sessão existe no store se e somente se o TTL não expirou. Não há flag
de "encerrada": ausência da chave é a única fonte de verdade.

O formato serializado usa camelCase (userId, createdAt, ...) para manter
compatibilidade com o JSON já gravado no Redis.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chat_ttl.domain.enums import MessageSender, SessionStatusLabel


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatMessage(_CamelModel):
    """Mensagem imutável anexada ao histórico da sessão."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sender: MessageSender = Field(alias="from")
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class ChatSession(_CamelModel):
    """Sessão ativa de um usuário.

    Responsabilidades:
    - created_at definido uma única vez na criação
    - updated_at atualizado a cada refresh/mensagem (nunca < created_at)
    - messages apenas cresce (append-only, ordem preservada)
    """

    user_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    messages: list[ChatMessage] = Field(default_factory=list)

    @classmethod
    def start(cls, user_id: str, now: datetime) -> ChatSession:
        """Cria sessão nova com ambos timestamps = now e histórico vazio."""
        return cls(user_id=user_id, created_at=now, updated_at=now, messages=[])

    def touch(self, now: datetime) -> None:
        """Atualiza updated_at sem nunca ficar antes de created_at."""
        self.updated_at = max(now, self.created_at)

    def append(self, sender: MessageSender, content: str, now: datetime) -> ChatMessage:
        """Anexa nova mensagem ao final do histórico e atualiza updated_at."""
        message = ChatMessage(sender=sender, content=content, timestamp=now)
        self.messages.append(message)
        self.touch(now)
        return message

    def to_json(self) -> str:
        """Serializa no formato de armazenamento (camelCase)."""
        return self.model_dump_json(by_alias=True)


class SessionRefresh(_CamelModel):
    """Resultado de create_or_refresh: {userId, key, expiresIn}."""

    user_id: str
    key: str
    expires_in: int


class SessionStatus(_CamelModel):
    """Resultado de status: {userId, isActive, timeRemaining, status}."""

    user_id: str
    is_active: bool
    time_remaining: int
    status: SessionStatusLabel
