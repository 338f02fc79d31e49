from __future__ import annotations

import pytest
from pydantic import ValidationError

from storeguard.config import get_settings


def test_settings_defaults() -> None:
    settings = get_settings()
    assert settings.cache_seconds == 600
    assert settings.rest.base_url == "http://127.0.0.1:8000/api"
    assert settings.rest.max_attempts == 3
    assert settings.rest.api_token is None


def test_cache_seconds_from_env(monkeypatch) -> None:
    monkeypatch.setenv("STOREGUARD_CACHE_SECONDS", "120")
    get_settings.cache_clear()

    assert get_settings().cache_seconds == 120


def test_negative_cache_seconds_rejected(monkeypatch) -> None:
    monkeypatch.setenv("STOREGUARD_CACHE_SECONDS", "-5")
    get_settings.cache_clear()

    with pytest.raises(ValidationError):
        get_settings()


def test_rest_settings_nested_env(monkeypatch) -> None:
    monkeypatch.setenv("STOREGUARD_REST__BASE_URL", "https://api.example.com/v2/")
    monkeypatch.setenv("STOREGUARD_REST__API_TOKEN", "  secret  ")
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.rest.base_url == "https://api.example.com/v2"
    assert settings.rest.api_token == "secret"


def test_api_token_blank_becomes_none(monkeypatch) -> None:
    monkeypatch.setenv("STOREGUARD_REST__API_TOKEN", "   ")
    get_settings.cache_clear()

    assert get_settings().rest.api_token is None
