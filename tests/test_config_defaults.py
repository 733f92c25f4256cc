import pytest
from pydantic import ValidationError

from community_moderation.core.config import DEFAULT_DATABASE_URL, Settings


def test_default_database_url_is_local_sqlite(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == DEFAULT_DATABASE_URL == "sqlite:///./moderation.db"


def test_cors_origins_accepts_comma_separated_list():
    settings = Settings(_env_file=None, CORS_ORIGINS="https://a.example, https://b.example")
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_severity_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("SEVERITY_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_cors_origins_from_environment(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example,https://b.example")
    settings = Settings(_env_file=None)
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]
