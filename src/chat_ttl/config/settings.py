"""Configurações da aplicação via variáveis de ambiente.

Credenciais do Redis vêm sempre do ambiente; nunca hardcode senhas.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# Prefixo do namespace de chaves de sessão no Redis
SESSION_KEY_PREFIX: str = "chat:"
# TTL padrão de inatividade (segundos)
DEFAULT_SESSION_TTL_SECONDS: int = 60
# Flags de notificação: E = keyevent, x = expired
KEYSPACE_NOTIFICATION_FLAGS: str = "Ex"


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "chat_ttl"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Session store backend
    session_store_backend: str = "memory"  # memory | redis

    # Redis (redis_url tem precedência sobre host/port/db)
    redis_url: str | None = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None
    redis_socket_timeout_seconds: float = 5.0

    # Retry com backoff exponencial para falhas de conexão
    redis_retry_attempts: int = 3
    redis_backoff_base_seconds: float = 0.1
    redis_backoff_cap_seconds: float = 3.0

    # Sessão
    session_key_prefix: str = SESSION_KEY_PREFIX
    session_default_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS

    # Listener de expiração
    expiration_listener_enabled: bool = True
    keyspace_notification_flags: str = KEYSPACE_NOTIFICATION_FLAGS
    listener_poll_timeout_seconds: float = 1.0
    listener_reconnect_delay_seconds: float = 1.0

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def validate_session_store_config(self) -> list[str]:
        """Valida backend de session store e política de TTL.

        Em staging/prod, memory é proibido: sem Redis não há notificação
        de expiração nem estado compartilhado entre processos.
        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        backend = self.session_store_backend.lower()

        valid_backends = {"memory", "redis"}
        if backend not in valid_backends:
            errors.append(
                f"SESSION_STORE_BACKEND '{backend}' inválido. Valores válidos: {valid_backends}"
            )

        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append(
                "SESSION_STORE_BACKEND=memory é proibido em staging/production. Use 'redis'."
            )

        if self.session_default_ttl_seconds <= 0:
            errors.append("SESSION_DEFAULT_TTL_SECONDS deve ser > 0")

        if self.redis_retry_attempts < 0:
            errors.append("REDIS_RETRY_ATTEMPTS deve ser >= 0")

        if not self.session_key_prefix:
            errors.append("SESSION_KEY_PREFIX não pode ser vazio")

        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings."""
    return Settings()
