"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from chat_ttl.api.routes import router
from chat_ttl.application.errors import SessionNotFoundError
from chat_ttl.application.runtime import ChatTTLRuntime
from chat_ttl.config.settings import Settings, get_settings
from chat_ttl.infra.expiration_listener import ExpirationHandler
from chat_ttl.infra.session_contract import SessionStoreError
from chat_ttl.observability.logging import configure_logging, get_logger
from chat_ttl.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


async def _session_not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "session_not_found"},
    )


async def _session_store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Session store failure surfaced to client",
        extra={"error_type": type(exc).__name__, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "session_store_unavailable"},
    )


def create_app(
    settings: Settings | None = None,
    expiration_handler: ExpirationHandler | None = None,
) -> FastAPI:
    """Cria a aplicação; conexões Redis vivem apenas dentro do lifespan.

    Raises:
        ValueError: Configuração de session store inválida
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name, settings.environment)

    store_errors = settings.validate_session_store_config()
    if store_errors:
        raise ValueError(
            f"Configuração de session store inválida para '{settings.environment}': "
            f"{'; '.join(store_errors)}"
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        runtime = ChatTTLRuntime(settings, expiration_handler=expiration_handler)
        app.state.session_manager = await runtime.start()
        app.state.runtime = runtime
        try:
            yield
        finally:
            app.state.session_manager = None
            await runtime.aclose()

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_exception_handler(SessionNotFoundError, _session_not_found_handler)
    app.add_exception_handler(SessionStoreError, _session_store_error_handler)
    app.include_router(router)

    app.state.settings = settings
    app.state.session_manager = None

    return app


# Instância padrão para uvicorn
app = create_app()
