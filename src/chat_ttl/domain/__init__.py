"""Domínio: modelos de sessão de chat e convenção de chaves."""

from chat_ttl.domain.enums import MessageSender, SessionStatusLabel
from chat_ttl.domain.keys import session_key, user_id_from_key
from chat_ttl.domain.models import ChatMessage, ChatSession, SessionRefresh, SessionStatus

__all__ = [
    "ChatMessage",
    "ChatSession",
    "MessageSender",
    "SessionRefresh",
    "SessionStatus",
    "SessionStatusLabel",
    "session_key",
    "user_id_from_key",
]
