"""Unit tests for settings."""

from uranium_sdk.config.settings import Settings, parse_comma_separated_list


def test_defaults():
    """Defaults match the documented values."""
    settings = Settings(api_key="key")

    assert settings.base_url == "https://gw.urnm.pro"
    assert settings.timeout == 20.0
    assert settings.retry_enabled is False
    assert settings.retryable_statuses == [500, 502, 503, 504]
    assert settings.chunk_max_attempts == 3
    assert settings.chunk_retry_base_delay == 1.0
    assert settings.max_file_size_bytes == 100 * 1024 * 1024


def test_environment_overrides(monkeypatch):
    """URANIUM_* environment variables are read."""
    monkeypatch.setenv("URANIUM_API_KEY", "from-env")
    monkeypatch.setenv("URANIUM_CHUNK_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("URANIUM_RETRYABLE_STATUSES", "502, 504")

    settings = Settings()

    assert settings.api_key == "from-env"
    assert settings.chunk_max_attempts == 5
    assert settings.retryable_statuses == [502, 504]


def test_parse_comma_separated_list():
    assert parse_comma_separated_list("a, b,,c") == ["a", "b", "c"]
    assert parse_comma_separated_list(["a"]) == ["a"]
    assert parse_comma_separated_list(None) == []
