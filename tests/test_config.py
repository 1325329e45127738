"""Tests for configuration parsing."""

import pytest

from fresh_reminder.config import Settings, parse_cors_origins


@pytest.mark.parametrize("raw", [None, "", "  ", "*"])
def test_cors_origins_default_to_any(raw: str | None) -> None:
    assert parse_cors_origins(raw) == ["*"]


def test_cors_origins_are_split_and_trimmed() -> None:
    assert parse_cors_origins("https://a.example, https://b.example,") == [
        "https://a.example",
        "https://b.example",
    ]


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "header.payload.signature")
    monkeypatch.setenv("ENFORCE_WRITE_OWNERSHIP", "false")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings()

    assert settings.mongo_uri == "mongodb://db:27017"
    assert settings.enforce_write_ownership is False
    assert settings.port == 8080
    assert settings.expiry_window_days == 5
    assert settings.expiry_result_limit == 6
