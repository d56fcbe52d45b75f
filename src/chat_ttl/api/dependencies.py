"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from chat_ttl.application.session.manager import ChatSessionManager
from chat_ttl.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_session_manager(request: Request) -> ChatSessionManager:
    """Retorna o gerenciador de sessões criado no startup."""

    manager = getattr(request.app.state, "session_manager", None)
    if manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="session_manager_not_ready",
        )
    return manager
