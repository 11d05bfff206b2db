from __future__ import annotations

import pytest

from src.chessbuddy.domain.chess import (
    DifficultyTier,
    MoveRequest,
    MoveTag,
    NoLegalMovesError,
    OpponentDecisionEngine,
    PythonChessRulesEngine,
    UnknownTierError,
)


def test_decide_returns_a_legal_move_and_leaves_position_alone(
    rules: PythonChessRulesEngine,
    decision_engine: OpponentDecisionEngine,
) -> None:
    position = rules.starting_position()
    legal = rules.legal_moves(position)
    for tier in DifficultyTier:
        move = decision_engine.decide(position, tier)
        assert move in legal
    assert position == rules.starting_position()


def test_medium_opponent_takes_the_hanging_pawn(
    rules: PythonChessRulesEngine,
    decision_engine: OpponentDecisionEngine,
) -> None:
    position = rules.position_from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    move = decision_engine.decide(position, DifficultyTier.medium)
    assert move.uci == "e4d5"
    assert MoveTag.capture in move.tags


def test_hard_opponent_heads_for_the_center(
    rules: PythonChessRulesEngine,
    decision_engine: OpponentDecisionEngine,
) -> None:
    position = rules.starting_position()
    for _ in range(20):
        assert decision_engine.decide(position, 3).destination in {"d4", "e4"}


def test_decide_without_legal_moves_is_a_wiring_error(
    rules: PythonChessRulesEngine,
    decision_engine: OpponentDecisionEngine,
) -> None:
    position = rules.starting_position()
    for uci in ("f2f3", "e7e5", "g2g4", "d8h4"):
        position = rules.apply_move(position, MoveRequest(uci[:2], uci[2:]))
    with pytest.raises(NoLegalMovesError):
        decision_engine.decide(position, DifficultyTier.easy)


def test_decide_rejects_unknown_tier(
    rules: PythonChessRulesEngine,
    decision_engine: OpponentDecisionEngine,
) -> None:
    with pytest.raises(UnknownTierError):
        decision_engine.decide(rules.starting_position(), 42)
