"""Testes unitários para config/settings.py."""

from __future__ import annotations

import pytest

from chat_ttl.config.settings import (
    DEFAULT_SESSION_TTL_SECONDS,
    KEYSPACE_NOTIFICATION_FLAGS,
    SESSION_KEY_PREFIX,
    Settings,
    get_settings,
)


class TestSettingsDefaults:
    """Testes para valores padrão de Settings."""

    def test_default_environment_is_development(self) -> None:
        s = Settings()
        assert s.environment == "development"
        assert s.is_development is True
        assert s.is_production is False

    def test_default_session_policy(self) -> None:
        """TTL padrão de 60s e namespace chat:."""
        s = Settings()
        assert s.session_default_ttl_seconds == DEFAULT_SESSION_TTL_SECONDS == 60
        assert s.session_key_prefix == SESSION_KEY_PREFIX == "chat:"

    def test_default_backend_is_memory(self) -> None:
        assert Settings().session_store_backend == "memory"

    def test_default_retry_policy_is_bounded(self) -> None:
        s = Settings()
        assert s.redis_retry_attempts == 3
        assert s.redis_backoff_cap_seconds == 3.0
        assert s.redis_backoff_base_seconds == 0.1

    def test_notification_flags_only_expired_events(self) -> None:
        assert Settings().keyspace_notification_flags == KEYSPACE_NOTIFICATION_FLAGS == "Ex"


class TestSettingsFromEnv:
    """Leitura via variáveis de ambiente."""

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_HOST", "redis.internal")
        monkeypatch.setenv("REDIS_PORT", "6380")
        monkeypatch.setenv("SESSION_DEFAULT_TTL_SECONDS", "120")
        s = Settings()
        assert s.redis_host == "redis.internal"
        assert s.redis_port == 6380
        assert s.session_default_ttl_seconds == 120

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestValidateSessionStoreConfig:
    """Validação de backend por ambiente."""

    def test_memory_ok_in_development(self) -> None:
        assert Settings(session_store_backend="memory").validate_session_store_config() == []

    def test_redis_ok_in_production(self) -> None:
        s = Settings(environment="production", session_store_backend="redis")
        assert s.validate_session_store_config() == []

    @pytest.mark.parametrize("environment", ["production", "staging"])
    def test_memory_forbidden_outside_development(self, environment: str) -> None:
        s = Settings(environment=environment, session_store_backend="memory")
        errors = s.validate_session_store_config()
        assert any("memory" in e for e in errors)

    def test_invalid_backend(self) -> None:
        errors = Settings(session_store_backend="firestore").validate_session_store_config()
        assert any("inválido" in e for e in errors)

    def test_non_positive_ttl(self) -> None:
        errors = Settings(session_default_ttl_seconds=0).validate_session_store_config()
        assert any("SESSION_DEFAULT_TTL_SECONDS" in e for e in errors)

    def test_empty_prefix(self) -> None:
        errors = Settings(session_key_prefix="").validate_session_store_config()
        assert any("SESSION_KEY_PREFIX" in e for e in errors)
