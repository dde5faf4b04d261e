from __future__ import annotations

from examprep.config import DEFAULT_MAX_UPLOAD_BYTES, Settings


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "LLM_PROVIDER",
        "GEMINI_API_KEY",
        "MAX_UPLOAD_BYTES",
        "MIN_CONTENT_CHARS",
        "ENFORCE_UPLOAD_POLICY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.llm_provider == "gemini"
    assert settings.gemini_api_key is None
    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.min_content_chars == 50
    assert settings.enforce_upload_policy is True
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", " Mock ")
    monkeypatch.setenv("GEMINI_API_KEY", "abc")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")
    monkeypatch.setenv("ENFORCE_UPLOAD_POLICY", "off")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "5.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.llm_provider == "mock"
    assert settings.gemini_api_key == "abc"
    assert settings.max_upload_bytes == 1024
    assert settings.enforce_upload_policy is False
    assert settings.http_timeout_seconds == 5.5
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("MIN_CONTENT_CHARS", "fifty")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "soon")

    settings = Settings.from_env()

    assert settings.min_content_chars == 50
    assert settings.http_timeout_seconds == 30.0


def test_blank_values_are_treated_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "   ")
    monkeypatch.setenv("LOG_DIR", "")

    settings = Settings.from_env()

    assert settings.gemini_api_key is None
    assert settings.log_dir == "logs"
