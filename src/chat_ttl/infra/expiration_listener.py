"""Listener de expiração de sessões via keyspace notifications do Redis.

Mantém uma assinatura dedicada ao canal __keyevent@{db}__:expired e
despacha um handler para cada chave expirada do namespace de sessões.

Garantias (e limites):
- Entrega at-most-once: eventos podem se perder em restarts do Redis ou
  durante reconexões. Serve para observabilidade, nunca para correção.
- O handler é síncrono e best-effort; exceções são logadas e nunca
  derrubam a assinatura.
- Nenhuma escrita no store: quando o evento chega a chave já foi removida.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from chat_ttl.config.settings import KEYSPACE_NOTIFICATION_FLAGS, SESSION_KEY_PREFIX
from chat_ttl.domain.keys import user_id_from_key
from chat_ttl.infra.session_contract import StoreUnavailableError
from chat_ttl.observability.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis
    from redis.asyncio.client import PubSub

logger: logging.Logger = get_logger(__name__)

ExpirationHandler = Callable[[str], None]


def expired_channel(db: int = 0) -> str:
    """Canal de keyevent de expiração para o banco `db`."""
    return f"__keyevent@{db}__:expired"


def log_session_expired(user_id: str) -> None:
    """Handler padrão: log estruturado do timeout de inatividade."""
    logger.warning(
        "Chat session expired",
        extra={"event": "session_expired", "user_id": user_id},
    )


class ExpirationListener:
    """Assinatura de longa duração para expiração de chaves de sessão.

    Roda duas tasks: um leitor que aguarda mensagens do pubsub e as coloca
    numa fila interna, e um despachante que consome a fila e chama o
    handler. Um handler lento não atrasa a leitura da assinatura.
    """

    def __init__(
        self,
        redis_client: Redis,
        handler: ExpirationHandler | None = None,
        *,
        db: int = 0,
        key_prefix: str = SESSION_KEY_PREFIX,
        notification_flags: str = KEYSPACE_NOTIFICATION_FLAGS,
        poll_timeout_seconds: float = 1.0,
        reconnect_delay_seconds: float = 1.0,
    ) -> None:
        self._redis = redis_client
        self._handler = handler or log_session_expired
        self._channel = expired_channel(db)
        self._key_prefix = key_prefix
        self._notification_flags = notification_flags
        self._poll_timeout = poll_timeout_seconds
        self._reconnect_delay = reconnect_delay_seconds
        self._pubsub: PubSub | None = None
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._reader_task: asyncio.Task[None] | None = None
        self._dispatcher_task: asyncio.Task[None] | None = None

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def running(self) -> bool:
        return self._reader_task is not None and not self._reader_task.done()

    async def enable_keyspace_notifications(self) -> bool:
        """Configura o Redis para emitir eventos de expiração.

        Falha não é fatal: sem a configuração os eventos apenas não chegam.
        Retorna True se a configuração foi aplicada.
        """
        try:
            await self._redis.config_set("notify-keyspace-events", self._notification_flags)
        except RedisError as e:
            logger.error(
                "Failed to enable keyspace notifications",
                extra={"flags": self._notification_flags, "error": str(e)},
            )
            return False

        logger.info(
            "Keyspace notifications enabled",
            extra={"flags": self._notification_flags},
        )
        return True

    async def start(self) -> None:
        """Habilita notificações, assina o canal e inicia as tasks.

        Raises:
            StoreUnavailableError: Se a assinatura do canal falhar
        """
        if self.running:
            return

        await self.enable_keyspace_notifications()

        pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(self._channel)
        except RedisError as e:
            await pubsub.aclose()
            logger.error(
                "Failed to subscribe to expiration events",
                extra={"channel": self._channel, "error": str(e)},
            )
            raise StoreUnavailableError(f"Cannot subscribe to {self._channel}: {e}") from e

        self._pubsub = pubsub
        self._reader_task = asyncio.create_task(
            self._read_loop(), name="expiration-listener-reader"
        )
        self._dispatcher_task = asyncio.create_task(
            self._dispatch_loop(), name="expiration-listener-dispatcher"
        )
        logger.info("Monitoring expiration events", extra={"channel": self._channel})

    async def stop(self) -> None:
        """Cancela as tasks, despacha eventos já enfileirados e fecha o pubsub."""
        tasks = [t for t in (self._reader_task, self._dispatcher_task) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._reader_task = None
        self._dispatcher_task = None

        while not self._queue.empty():
            self.dispatch(self._queue.get_nowait())

        if self._pubsub is not None:
            try:
                await self._pubsub.unsubscribe(self._channel)
            except RedisError as e:
                logger.warning(
                    "Failed to unsubscribe from expiration events",
                    extra={"channel": self._channel, "error": str(e)},
                )
            await self._pubsub.aclose()
            self._pubsub = None
            logger.info("Expiration listener stopped", extra={"channel": self._channel})

    def extract_expired_key(self, message: dict[str, Any] | None) -> str | None:
        """Retorna o nome da chave expirada se a mensagem é do canal assinado."""
        if not message or message.get("type") != "message":
            return None

        channel = message.get("channel")
        data = message.get("data")
        if isinstance(channel, bytes):
            channel = channel.decode("utf-8")
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")

        if channel != self._channel or not isinstance(data, str):
            return None
        return data

    def dispatch(self, expired_key: str) -> bool:
        """Chama o handler para chaves do namespace; ignora as demais.

        Nunca propaga exceção do handler. Retorna True se o handler foi chamado.
        """
        user_id = user_id_from_key(expired_key, self._key_prefix)
        if user_id is None:
            return False

        try:
            self._handler(user_id)
        except Exception:
            logger.exception(
                "Expiration handler failed",
                extra={"user_id": user_id, "key": expired_key},
            )
        return True

    async def _read_loop(self) -> None:
        assert self._pubsub is not None
        while True:
            try:
                message = await self._pubsub.get_message(
                    ignore_subscribe_messages=True, timeout=self._poll_timeout
                )
            except RedisError as e:
                # Eventos durante a reconexão se perdem (at-most-once)
                logger.warning(
                    "Expiration subscription interrupted",
                    extra={"channel": self._channel, "error": str(e)},
                )
                await asyncio.sleep(self._reconnect_delay)
                continue
            except Exception:
                logger.exception(
                    "Unexpected error reading expiration events",
                    extra={"channel": self._channel},
                )
                await asyncio.sleep(self._reconnect_delay)
                continue

            expired_key = self.extract_expired_key(message)
            if expired_key is not None:
                self._queue.put_nowait(expired_key)

    async def _dispatch_loop(self) -> None:
        while True:
            expired_key = await self._queue.get()
            self.dispatch(expired_key)
