from packages.sms_engine.core.config import (
    DEFAULT_DEDUP_WINDOW_SECONDS,
    DEFAULT_MIN_MERCHANT_LENGTH,
    Settings,
    get_settings,
)


def test_defaults_match_constants(monkeypatch):
    monkeypatch.delenv("SMS_ENGINE_DEDUP_WINDOW_SECONDS", raising=False)
    settings = Settings(_env_file=None)

    assert settings.DEDUP_WINDOW_SECONDS == DEFAULT_DEDUP_WINDOW_SECONDS == 60
    assert settings.MIN_MERCHANT_LENGTH == DEFAULT_MIN_MERCHANT_LENGTH == 3
    assert settings.MAX_MERCHANT_LENGTH == 50


def test_environment_override(monkeypatch):
    monkeypatch.setenv("SMS_ENGINE_DEDUP_WINDOW_SECONDS", "30")
    monkeypatch.setenv("SMS_ENGINE_PARSE_WORKERS", "8")

    settings = get_settings()

    assert settings.DEDUP_WINDOW_SECONDS == 30
    assert settings.PARSE_WORKERS == 8


def test_json_logs_outside_development():
    assert not Settings(ENVIRONMENT="development").json_logs
    assert Settings(ENVIRONMENT="production").json_logs
