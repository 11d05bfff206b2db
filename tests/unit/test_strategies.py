from __future__ import annotations

import random

import pytest

from src.chessbuddy.domain.chess import (
    DifficultyTier,
    LegalMove,
    MoveTag,
    NoLegalMovesError,
    StrategyRegistry,
    UnknownTierError,
    classify,
    resolve_tier,
    select,
)
from src.chessbuddy.domain.chess.strategies import random_strategy


def _move(uci: str, *tags: MoveTag) -> LegalMove:
    return LegalMove(uci=uci, san=uci, source=uci[:2], destination=uci[2:4], tags=frozenset(tags))


QUIET = [_move("a2a3"), _move("h2h3"), _move("g1h3")]
CAPTURE = _move("c4f7", MoveTag.capture, MoveTag.check)
OTHER_CAPTURE = _move("b5c6", MoveTag.capture)
CHECK = _move("d1h5", MoveTag.check)
CENTRAL = [_move("e2e4"), _move("d2d4")]


@pytest.mark.parametrize("tier", list(DifficultyTier))
def test_every_tier_returns_one_of_the_candidates(tier: DifficultyTier) -> None:
    moves = QUIET + [CAPTURE, CHECK] + CENTRAL
    rng = random.Random(3)
    for _ in range(100):
        assert select(tier, moves, rng=rng) in moves


def test_easy_spreads_choices_over_all_moves() -> None:
    rng = random.Random(11)
    picks = {select(DifficultyTier.easy, QUIET, rng=rng).uci for _ in range(200)}
    assert picks == {move.uci for move in QUIET}


def test_medium_never_skips_an_available_capture() -> None:
    moves = QUIET + [CHECK, CAPTURE, OTHER_CAPTURE]
    rng = random.Random(5)
    picks = [select(DifficultyTier.medium, moves, rng=rng) for _ in range(100)]
    assert all(classify(move).is_capture for move in picks)
    assert {move.uci for move in picks} == {CAPTURE.uci, OTHER_CAPTURE.uci}


def test_medium_prefers_checks_when_no_capture_exists() -> None:
    rng = random.Random(5)
    for _ in range(50):
        assert select(DifficultyTier.medium, QUIET + [CHECK], rng=rng) == CHECK


def test_medium_falls_back_to_any_move() -> None:
    rng = random.Random(5)
    assert select(DifficultyTier.medium, QUIET, rng=rng) in QUIET


def test_hard_never_leaves_the_center_when_it_can_reach_it() -> None:
    moves = QUIET + [CAPTURE] + CENTRAL
    rng = random.Random(8)
    for _ in range(100):
        assert classify(select(DifficultyTier.hard, moves, rng=rng)).is_central


def test_hard_falls_back_when_no_central_move_exists() -> None:
    rng = random.Random(8)
    assert select(DifficultyTier.hard, QUIET, rng=rng) in QUIET


def test_empty_move_list_fails_loudly() -> None:
    with pytest.raises(NoLegalMovesError):
        select(DifficultyTier.easy, [])


@pytest.mark.parametrize("value", [0, 4, "expert", None, True, 2.5, 1.9, "2.5"])
def test_unknown_tier_is_rejected(value) -> None:
    with pytest.raises(UnknownTierError):
        select(value, QUIET)


def test_resolve_tier_accepts_ordinals_and_strings() -> None:
    assert resolve_tier(1) is DifficultyTier.easy
    assert resolve_tier("3") is DifficultyTier.hard
    assert resolve_tier(DifficultyTier.medium) is DifficultyTier.medium
    assert resolve_tier(2.0) is DifficultyTier.medium
    assert [tier.description for tier in DifficultyTier] == ["Easy", "Medium", "Hard"]


def test_registry_without_a_strategy_for_tier_reports_unknown_tier() -> None:
    registry = StrategyRegistry({DifficultyTier.easy: random_strategy})
    assert registry.tiers == [DifficultyTier.easy]
    with pytest.raises(UnknownTierError):
        registry.select(DifficultyTier.hard, QUIET)
