"""Gerenciamento de ciclo de vida de sessões de chat."""

from chat_ttl.application.session.manager import ChatSessionManager

__all__ = ["ChatSessionManager"]
