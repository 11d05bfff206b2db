from __future__ import annotations

import random
from collections import deque
from typing import Callable, Iterable, Sequence

import pytest

from src.chessbuddy.domain.chess import (
    DifficultyTier,
    LegalMove,
    OpponentDecisionEngine,
    PythonChessRulesEngine,
    StrategyRegistry,
)
from src.chessbuddy.infrastructure.config import AppConfig
from src.chessbuddy.interface.http.app import create_app


def scripted_registry(replies: Iterable[str]) -> StrategyRegistry:
    """Registry whose every tier plays the given UCI replies in order."""
    queue = deque(replies)

    def _scripted(moves: Sequence[LegalMove], rng: random.Random) -> LegalMove:
        wanted = queue.popleft()
        for move in moves:
            if move.uci == wanted:
                return move
        raise AssertionError(f"Scripted reply {wanted} is not legal here.")

    return StrategyRegistry({tier: _scripted for tier in DifficultyTier})


@pytest.fixture(scope="session")
def app_config() -> AppConfig:
    """Provide a configuration tuned for isolated tests."""
    return AppConfig(
        flask_env="test",
        default_player_color="white",
        default_difficulty=2,
        opponent_seed=1234,
        additional={},
    )


@pytest.fixture
def rules() -> PythonChessRulesEngine:
    return PythonChessRulesEngine()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240601)


@pytest.fixture
def decision_engine(rules: PythonChessRulesEngine, rng: random.Random) -> OpponentDecisionEngine:
    return OpponentDecisionEngine(rules, StrategyRegistry(rng=rng))


@pytest.fixture
def scripted_engine(rules: PythonChessRulesEngine) -> Callable[[Iterable[str]], OpponentDecisionEngine]:
    """Factory for opponents that play fixed UCI replies in order."""

    def _factory(replies: Iterable[str]) -> OpponentDecisionEngine:
        return OpponentDecisionEngine(rules, scripted_registry(replies))

    return _factory


@pytest.fixture
def app(app_config: AppConfig):
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    return flask_app
