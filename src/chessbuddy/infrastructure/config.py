from __future__ import annotations

from dataclasses import dataclass, field
import os


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Centralized runtime configuration for ChessBuddy services."""

    flask_env: str = "production"
    default_player_color: str = "white"
    default_difficulty: int = 2
    opponent_seed: int | None = None
    additional: dict[str, str] = field(default_factory=dict)


def load_config(prefix: str = "") -> AppConfig:
    """Load application configuration from environment variables."""

    def _get_env(key: str, default: str = "") -> str:
        env_key = f"{prefix}{key}"
        return os.getenv(env_key, default)

    def _parse_int(raw: str, fallback: int | None) -> int | None:
        try:
            return int(raw)
        except (TypeError, ValueError):
            return fallback

    player_color = _get_env("DEFAULT_PLAYER_COLOR", "white").strip().lower()
    if player_color not in {"white", "black"}:
        player_color = "white"

    default_difficulty = _parse_int(_get_env("DEFAULT_DIFFICULTY", "2"), 2)
    opponent_seed = _parse_int(_get_env("OPPONENT_SEED", ""), None)

    additional_keys = ("STRUCTLOG_LEVEL",)
    additional: dict[str, str] = {}
    for key in additional_keys:
        value = _get_env(key, "")
        if value:
            additional[key] = value

    return AppConfig(
        flask_env=_get_env("FLASK_ENV", "production"),
        default_player_color=player_color,
        default_difficulty=default_difficulty if default_difficulty is not None else 2,
        opponent_seed=opponent_seed,
        additional=additional,
    )


__all__ = ["AppConfig", "load_config"]
