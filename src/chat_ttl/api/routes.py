"""Rotas HTTP de sessões de chat.

Apenas encaminham para o ChatSessionManager; erros tipados são traduzidos
pelos exception handlers registrados em create_app.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chat_ttl.api.dependencies import get_session_manager, get_settings
from chat_ttl.api.schemas import (
    ActivityResponse,
    AppendMessageRequest,
    EndChatResponse,
    StartChatRequest,
)
from chat_ttl.application.session.manager import ChatSessionManager
from chat_ttl.config.settings import Settings
from chat_ttl.domain.models import ChatSession, SessionRefresh, SessionStatus

router = APIRouter()
chat_router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@chat_router.post("/start", response_model=SessionRefresh)
async def start_chat(
    body: StartChatRequest,
    manager: ChatSessionManager = Depends(get_session_manager),
) -> SessionRefresh:
    """Inicia um chat ou reseta o timer de inatividade."""
    return await manager.create_or_refresh(body.user_id, body.timeout_seconds)


@chat_router.post("/activity/{user_id}", response_model=ActivityResponse)
async def register_activity(
    user_id: str,
    manager: ChatSessionManager = Depends(get_session_manager),
) -> ActivityResponse:
    """Registra atividade do usuário (reseta o timer com o TTL padrão)."""
    result = await manager.register_activity(user_id)
    return ActivityResponse(
        **result.model_dump(),
        message="Atividade registrada. Timer resetado.",
    )


@chat_router.post("/messages/{user_id}", response_model=ChatSession)
async def append_message(
    user_id: str,
    body: AppendMessageRequest,
    manager: ChatSessionManager = Depends(get_session_manager),
) -> ChatSession:
    """Anexa mensagem a uma sessão ativa (404 se ausente/expirada)."""
    return await manager.append_message(
        user_id, body.sender, body.content, body.timeout_seconds
    )


@chat_router.get("/status/{user_id}", response_model=SessionStatus)
async def get_chat_status(
    user_id: str,
    manager: ChatSessionManager = Depends(get_session_manager),
) -> SessionStatus:
    """Verifica o status de um chat sem renovar o TTL."""
    return await manager.status(user_id)


@chat_router.post("/end/{user_id}", response_model=EndChatResponse)
async def end_chat(
    user_id: str,
    manager: ChatSessionManager = Depends(get_session_manager),
) -> EndChatResponse:
    """Encerra manualmente um chat."""
    await manager.end(user_id)
    return EndChatResponse(user_id=user_id, message="Chat encerrado manualmente")


router.include_router(chat_router)
