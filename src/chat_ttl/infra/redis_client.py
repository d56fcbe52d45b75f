"""Criação de clientes Redis assíncronos com retry e backoff exponencial.

Cada fluxo (comandos de request e assinatura de expiração) recebe seu
próprio cliente, para que a assinatura bloqueante nunca dispute conexão
com o tráfego de requests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from chat_ttl.observability.logging import get_logger

if TYPE_CHECKING:
    from chat_ttl.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def build_retry_policy(settings: Settings) -> Retry:
    """Backoff exponencial limitado (cap em segundos, número fixo de tentativas)."""
    return Retry(
        ExponentialBackoff(
            cap=settings.redis_backoff_cap_seconds,
            base=settings.redis_backoff_base_seconds,
        ),
        settings.redis_retry_attempts,
    )


def create_redis_client(
    settings: Settings,
    purpose: str = "commands",
    *,
    encoding_errors: str = "strict",
) -> Redis:
    """Cria cliente Redis assíncrono a partir de Settings.

    Args:
        settings: Configurações da aplicação
        purpose: Rótulo do fluxo (commands | expiration_listener), só para log
        encoding_errors: Tratamento de bytes não UTF-8 na decodificação das
            respostas ("replace" no listener: nomes de chave são arbitrários)

    Returns:
        Cliente com decode_responses=True e política de retry configurada
    """
    options = {
        "decode_responses": True,
        "encoding_errors": encoding_errors,
        "socket_timeout": settings.redis_socket_timeout_seconds,
        "socket_connect_timeout": settings.redis_socket_timeout_seconds,
        "retry": build_retry_policy(settings),
        "retry_on_error": [RedisConnectionError, RedisTimeoutError],
    }

    if settings.redis_url:
        client = Redis.from_url(settings.redis_url, **options)
        target = settings.redis_url.split("@")[-1]  # Sem credenciais
    else:
        client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            **options,
        )
        target = f"{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"

    logger.info(
        "Redis client created",
        extra={
            "purpose": purpose,
            "target": target,
            "retry_attempts": settings.redis_retry_attempts,
        },
    )
    return client
