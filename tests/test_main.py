"""Tests for main module."""

from fresh_reminder import main as main_module


def test_main_serves_configured_app(monkeypatch) -> None:
    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "header.payload.signature")
    monkeypatch.setenv("PORT", "4000")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs))
    )

    main_module.main()

    assert calls == [
        (
            ("fresh_reminder.api.asgi:app",),
            {"host": "0.0.0.0", "port": 4000, "log_level": "warning"},  # noqa: S104
        )
    ]
