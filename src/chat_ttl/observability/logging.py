"""Configuração de logging estruturado (JSON)."""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from chat_ttl.observability.middleware import get_correlation_id

# redis-py loga cada reconexão em DEBUG/INFO; o store já loga falhas tipadas
_NOISY_LOGGERS = ("redis", "redis.asyncio")


class ServiceContextFilter(logging.Filter):
    """Anota cada record com service, environment e correlation_id.

    Eventos do listener de expiração não nascem de um request: o
    correlation_id fica vazio nesses logs.
    """

    def __init__(self, service_name: str, environment: str) -> None:
        super().__init__()
        self._service_name = service_name
        self._environment = environment

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        record.service = self._service_name
        record.environment = self._environment
        return True


def configure_logging(level: str, service_name: str, environment: str = "development") -> None:
    """Instala um único handler JSON no root logger."""

    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s "
        "%(correlation_id)s %(service)s %(environment)s",
        rename_fields={"levelname": "level", "name": "logger"},
    )

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(ServiceContextFilter(service_name, environment))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    """Retorna logger simples; o filtro do handler injeta o contexto."""

    return logging.getLogger(name)
