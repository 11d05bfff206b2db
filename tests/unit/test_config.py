from __future__ import annotations

import pytest

from src.chessbuddy.infrastructure.config import AppConfig, load_config


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("FLASK_ENV", "DEFAULT_PLAYER_COLOR", "DEFAULT_DIFFICULTY", "OPPONENT_SEED", "STRUCTLOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)

    assert load_config() == AppConfig()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CB_FLASK_ENV", "development")
    monkeypatch.setenv("CB_DEFAULT_PLAYER_COLOR", "Black")
    monkeypatch.setenv("CB_DEFAULT_DIFFICULTY", "3")
    monkeypatch.setenv("CB_OPPONENT_SEED", "99")
    monkeypatch.setenv("CB_STRUCTLOG_LEVEL", "DEBUG")

    config = load_config(prefix="CB_")
    assert config.flask_env == "development"
    assert config.default_player_color == "black"
    assert config.default_difficulty == 3
    assert config.opponent_seed == 99
    assert config.additional == {"STRUCTLOG_LEVEL": "DEBUG"}


def test_malformed_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CB_DEFAULT_PLAYER_COLOR", "purple")
    monkeypatch.setenv("CB_DEFAULT_DIFFICULTY", "hardest")
    monkeypatch.setenv("CB_OPPONENT_SEED", "abc")

    config = load_config(prefix="CB_")
    assert config.default_player_color == "white"
    assert config.default_difficulty == 2
    assert config.opponent_seed is None
