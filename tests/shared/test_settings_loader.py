"""Tests for pydantic-settings-backed configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.errtrace.config import TraceSettings, load_settings


def test_load_settings_uses_precedence_cascade(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """CLI params should override env, env should override YAML, then defaults."""
    config_file = tmp_path / "errtrace.yaml"
    config_file.write_text(
        "\n".join(
            [
                "debug: true",
                "max_hops: 20",
                "logging:",
                "  level: WARNING",
                "  service: from-file",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("TRACE_LOGGING__LEVEL", "ERROR")
    monkeypatch.setenv("TRACE_MAX_HOPS", "30")
    monkeypatch.setenv("TRACE_HTTP__JSON_INDENT", "2")

    settings = load_settings(
        cli_params={"logging": {"level": "DEBUG"}},
        config_path=config_file,
    )

    assert isinstance(settings, TraceSettings)
    assert settings.logging.level == "DEBUG"
    assert settings.logging.service == "from-file"
    assert settings.max_hops == 30
    assert settings.debug is True
    assert settings.http.json_indent == 2


def test_load_settings_uses_defaults_when_sources_missing(tmp_path: Path) -> None:
    """Missing YAML and no ``TRACE_`` env should yield model defaults."""
    settings = load_settings(config_path=tmp_path / "absent.yaml")

    assert settings.debug is False
    assert settings.max_hops == 50
    assert settings.logging.json_output is True
    assert settings.http.json_indent == 4


def test_load_settings_reads_yaml_when_env_is_silent(tmp_path: Path) -> None:
    """YAML values should apply when nothing of higher precedence sets them."""
    config_file = tmp_path / "errtrace.yaml"
    config_file.write_text("http:\n  json_indent: 0\n", encoding="utf-8")

    settings = load_settings(config_path=config_file)

    assert settings.http.json_indent == 0
    assert settings.logging.level == "INFO"


def test_trace_settings_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Direct construction should honour ``TRACE_`` variables."""
    monkeypatch.setenv("TRACE_DEBUG", "true")
    monkeypatch.setenv("TRACE_LOGGING__LEVEL", "WARNING")

    settings = TraceSettings()

    assert settings.is_debug() is True
    assert settings.logging.level == "WARNING"


def test_trace_settings_rejects_non_positive_hop_budget() -> None:
    """The hop budget must stay positive so traversal always progresses."""
    with pytest.raises(ValueError):
        TraceSettings(max_hops=0)
