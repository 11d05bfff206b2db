"""
Difficulty tiers and the move-selection strategy attached to each of them.

Every strategy narrows the full candidate list with a filter and falls back to
the whole list when nothing matches, then picks uniformly at random among the
survivors. None of them searches or evaluates positions.
"""
from __future__ import annotations

import random
from enum import IntEnum
from typing import Callable, Mapping, Sequence

from src.chessbuddy.domain.chess.errors import NoLegalMovesError, UnknownTierError
from src.chessbuddy.domain.chess.notation import classify
from src.chessbuddy.domain.chess.rules import LegalMove

Strategy = Callable[[Sequence[LegalMove], random.Random], LegalMove]


class DifficultyTier(IntEnum):
    easy = 1
    medium = 2
    hard = 3

    @property
    def description(self) -> str:
        return self.name.capitalize()


def resolve_tier(value: DifficultyTier | int | str) -> DifficultyTier:
    """Coerce an ordinal (or its string form) into a DifficultyTier."""
    if isinstance(value, DifficultyTier):
        return value
    if isinstance(value, bool):
        raise UnknownTierError(f"Unknown difficulty tier: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise UnknownTierError(f"Unknown difficulty tier: {value!r}")
    try:
        return DifficultyTier(int(value))
    except (TypeError, ValueError) as exc:
        raise UnknownTierError(f"Unknown difficulty tier: {value!r}") from exc


def _pick(candidates: Sequence[LegalMove], rng: random.Random) -> LegalMove:
    return candidates[rng.randrange(len(candidates))]


def random_strategy(moves: Sequence[LegalMove], rng: random.Random) -> LegalMove:
    return _pick(moves, rng)


def aggressive_strategy(moves: Sequence[LegalMove], rng: random.Random) -> LegalMove:
    """Captures first, then checks, then anything."""
    traits = [(move, classify(move)) for move in moves]
    captures = [move for move, trait in traits if trait.is_capture]
    if captures:
        return _pick(captures, rng)
    checks = [move for move, trait in traits if trait.is_check]
    if checks:
        return _pick(checks, rng)
    return _pick(moves, rng)


def central_strategy(moves: Sequence[LegalMove], rng: random.Random) -> LegalMove:
    """Moves landing on the four central squares, then anything."""
    central = [move for move in moves if classify(move).is_central]
    return _pick(central or moves, rng)


DEFAULT_STRATEGIES: Mapping[DifficultyTier, Strategy] = {
    DifficultyTier.easy: random_strategy,
    DifficultyTier.medium: aggressive_strategy,
    DifficultyTier.hard: central_strategy,
}


class StrategyRegistry:
    """Look up and run the strategy configured for a difficulty tier."""

    def __init__(
        self,
        strategies: Mapping[DifficultyTier, Strategy] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._strategies = dict(DEFAULT_STRATEGIES if strategies is None else strategies)
        self._rng = rng or random.Random()

    @property
    def tiers(self) -> list[DifficultyTier]:
        return sorted(self._strategies)

    def strategy_for(self, tier: DifficultyTier | int | str) -> Strategy:
        resolved = resolve_tier(tier)
        strategy = self._strategies.get(resolved)
        if strategy is None:
            raise UnknownTierError(f"No strategy registered for tier {resolved.value}.")
        return strategy

    def select(
        self,
        tier: DifficultyTier | int | str,
        legal_moves: Sequence[LegalMove],
        *,
        rng: random.Random | None = None,
    ) -> LegalMove:
        strategy = self.strategy_for(tier)
        if not legal_moves:
            raise NoLegalMovesError("Cannot select a move from an empty move list.")
        return strategy(list(legal_moves), rng or self._rng)


DEFAULT_REGISTRY = StrategyRegistry()


def select(
    tier: DifficultyTier | int | str,
    legal_moves: Sequence[LegalMove],
    rng: random.Random | None = None,
) -> LegalMove:
    return DEFAULT_REGISTRY.select(tier, legal_moves, rng=rng)


__all__ = [
    "DEFAULT_REGISTRY",
    "DEFAULT_STRATEGIES",
    "DifficultyTier",
    "Strategy",
    "StrategyRegistry",
    "aggressive_strategy",
    "central_strategy",
    "random_strategy",
    "resolve_tier",
    "select",
]
