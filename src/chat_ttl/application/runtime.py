"""Recursos de processo: store, gerenciador e listener de expiração.

Duas conexões Redis independentes vivem durante todo o processo: uma para
comandos de request, outra dedicada à assinatura de expiração. Ambas são
criadas em start() e fechadas em aclose(), inclusive quando start() falha
no meio do caminho.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from chat_ttl.application.session.manager import ChatSessionManager
from chat_ttl.infra.expiration_listener import ExpirationHandler, ExpirationListener
from chat_ttl.infra.redis_client import create_redis_client
from chat_ttl.infra.session_store import create_session_store
from chat_ttl.observability.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from chat_ttl.config.settings import Settings
    from chat_ttl.infra.session_contract import SessionStoreClient

logger: logging.Logger = get_logger(__name__)


class ChatTTLRuntime:
    """Ciclo de vida dos recursos de longa duração (init no startup, close no shutdown)."""

    def __init__(
        self,
        settings: Settings,
        expiration_handler: ExpirationHandler | None = None,
    ) -> None:
        self._settings = settings
        self._expiration_handler = expiration_handler
        self._subscriber_client: Redis | None = None
        self.store: SessionStoreClient | None = None
        self.manager: ChatSessionManager | None = None
        self.listener: ExpirationListener | None = None

    async def start(self) -> ChatSessionManager:
        """Cria store, gerenciador e (com Redis) o listener de expiração."""
        settings = self._settings
        backend = settings.session_store_backend.lower()

        try:
            if backend == "redis":
                command_client = create_redis_client(settings, purpose="commands")
                self.store = create_session_store(
                    "redis", client=command_client, key_prefix=settings.session_key_prefix
                )
                if settings.expiration_listener_enabled:
                    await self._start_listener()
            else:
                self.store = create_session_store(
                    backend, key_prefix=settings.session_key_prefix
                )
                logger.warning(
                    "Expiration listener disabled for non-redis backend",
                    extra={"backend": backend},
                )

            self.manager = ChatSessionManager(
                self.store, default_ttl_seconds=settings.session_default_ttl_seconds
            )
        except BaseException:
            await self.aclose()
            raise

        logger.info(
            "Chat session runtime started",
            extra={
                "backend": backend,
                "listener": self.listener is not None,
                "default_ttl_seconds": settings.session_default_ttl_seconds,
            },
        )
        return self.manager

    async def _start_listener(self) -> None:
        settings = self._settings
        self._subscriber_client = create_redis_client(
            settings, purpose="expiration_listener", encoding_errors="replace"
        )
        self.listener = ExpirationListener(
            self._subscriber_client,
            self._expiration_handler,
            db=settings.redis_db,
            key_prefix=settings.session_key_prefix,
            notification_flags=settings.keyspace_notification_flags,
            poll_timeout_seconds=settings.listener_poll_timeout_seconds,
            reconnect_delay_seconds=settings.listener_reconnect_delay_seconds,
        )
        await self.listener.start()

    async def aclose(self) -> None:
        """Para o listener e fecha as duas conexões, nesta ordem."""
        try:
            if self.listener is not None:
                await self.listener.stop()
        finally:
            try:
                if self.store is not None:
                    await self.store.close()
            finally:
                if self._subscriber_client is not None:
                    await self._subscriber_client.aclose()
                self.listener = None
                self.store = None
                self.manager = None
                self._subscriber_client = None
        logger.info("Chat session runtime closed")

    async def __aenter__(self) -> ChatSessionManager:
        return await self.start()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
