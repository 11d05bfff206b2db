from __future__ import annotations

import random

from flask import Flask

from src.chessbuddy.domain.chess import (
    OpponentDecisionEngine,
    PythonChessRulesEngine,
    SessionManager,
    Side,
    StrategyRegistry,
    resolve_tier,
)
from src.chessbuddy.infrastructure.config import AppConfig, load_config
from src.chessbuddy.infrastructure.persistence.memory_repository import (
    InMemoryGameSessionRepository,
)
from src.chessbuddy.interface.http.gameplay_routes import gameplay_bp
from src.chessbuddy.interface.telemetry.logging import setup_logging, get_logger


def build_session_manager(cfg: AppConfig) -> SessionManager:
    """Wire the rules engine, opponent and in-memory store from configuration."""
    rules = PythonChessRulesEngine()
    rng = random.Random(cfg.opponent_seed) if cfg.opponent_seed is not None else None
    engine = OpponentDecisionEngine(rules, StrategyRegistry(rng=rng))
    return SessionManager(
        InMemoryGameSessionRepository(),
        rules,
        engine,
        default_side=Side(cfg.default_player_color),
        default_tier=resolve_tier(cfg.default_difficulty),
    )


def create_app(config: AppConfig | None = None) -> Flask:
    """Instantiate Flask application with shared configuration."""
    cfg = config or load_config()

    setup_logging(cfg.additional.get("STRUCTLOG_LEVEL", "INFO"))
    logger = get_logger("chessbuddy.app")

    app = Flask(__name__)
    app.config.update(
        ENV=cfg.flask_env,
        APP_CONFIG=cfg,
    )
    app.extensions["session_manager"] = build_session_manager(cfg)

    app.register_blueprint(gameplay_bp, url_prefix="/api/v1/sessions")

    @app.get("/api/v1/difficulties")
    def list_difficulties():
        manager: SessionManager = app.extensions["session_manager"]
        return {
            "difficulties": [
                {"level": tier.value, "description": tier.description}
                for tier in manager.tiers
            ],
            "default": cfg.default_difficulty,
        }, 200

    @app.get("/healthz")
    def healthcheck():
        return {"status": "ok"}, 200

    logger.info(
        "flask_app_initialized",
        env=cfg.flask_env,
        default_difficulty=cfg.default_difficulty,
        seeded=cfg.opponent_seed is not None,
    )
    return app


__all__ = ["build_session_manager", "create_app"]
