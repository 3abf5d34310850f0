"""Tests for Settings."""

from chat_auth_store.config import DEFAULT_DATABASE_URL, Settings


def test_defaults():
    settings = Settings()
    assert settings.environment == "development"
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.code_verifier_ttl_minutes == 10
    assert settings.token_encryption_key is None
    assert settings.is_production is False


def test_test_environment_uses_test_database(monkeypatch):
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./other_test.db")
    settings = Settings()
    assert settings.is_test is True
    assert settings.database_url == "sqlite+aiosqlite:///./other_test.db"


def test_production_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/chat")
    settings = Settings()
    assert settings.is_production is True
    assert settings.database_url_obj.get_backend_name() == "postgresql"
    assert settings.database_url_obj.database == "chat"


def test_explicit_database_url():
    settings = Settings(database_url="sqlite+aiosqlite:///./explicit.db")
    assert settings.database_url == "sqlite+aiosqlite:///./explicit.db"
