"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from collab.config import DEFAULT_DATABASE_URL, AuthConfig


def test_cloud_url_trailing_slash_stripped():
    config = AuthConfig(cloud_url="https://cloud.example.com/", api_token="t")
    assert config.cloud_url == "https://cloud.example.com"
    assert config.database_url == DEFAULT_DATABASE_URL


def test_from_env(monkeypatch):
    monkeypatch.setenv("COLLAB_CLOUD_URL", "https://authority.example.com/")
    monkeypatch.setenv("COLLAB_API_TOKEN", "secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("AUTHORITY_TIMEOUT_SECONDS", "2.5")

    config = AuthConfig.from_env()

    assert config.cloud_url == "https://authority.example.com"
    assert config.api_token == "secret"
    assert config.database_url == "sqlite+aiosqlite:///:memory:"
    assert config.authority_timeout_seconds == 2.5


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        AuthConfig(cloud_url="http://x", api_token="t", authority_timeout_seconds=0)
