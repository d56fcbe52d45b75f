"""Erros de aplicação expostos ao adaptador HTTP."""

from __future__ import annotations


class SessionNotFoundError(Exception):
    """Sessão ausente ou expirada (recuperável, visível ao cliente)."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Chat not found for user: {user_id}")
        self.user_id = user_id
