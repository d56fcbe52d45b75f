"""Enums de domínio para remetentes e status de sessão."""

from __future__ import annotations

from enum import StrEnum


class MessageSender(StrEnum):
    """Origem de uma mensagem no chat."""

    USER = "user"
    BOT = "bot"
    SYSTEM = "system"


class SessionStatusLabel(StrEnum):
    """Rótulo externo do estado da sessão."""

    ACTIVE = "active"
    EXPIRED = "expired"
