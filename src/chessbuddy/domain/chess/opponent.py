from __future__ import annotations

import structlog

from src.chessbuddy.domain.chess.errors import NoLegalMovesError
from src.chessbuddy.domain.chess.rules import LegalMove, Position, RulesEngine
from src.chessbuddy.domain.chess.strategies import (
    DEFAULT_REGISTRY,
    DifficultyTier,
    StrategyRegistry,
    resolve_tier,
)

logger = structlog.get_logger("chessbuddy.opponent")


class OpponentDecisionEngine:
    """Choose the computer's reply for a position at a given difficulty tier.

    The engine is advisory only: it returns a move and leaves applying it to
    the caller.
    """

    def __init__(self, rules: RulesEngine, registry: StrategyRegistry | None = None) -> None:
        self._rules = rules
        self._registry = registry or DEFAULT_REGISTRY

    @property
    def registry(self) -> StrategyRegistry:
        return self._registry

    def decide(self, position: Position, tier: DifficultyTier | int) -> LegalMove:
        resolved = resolve_tier(tier)
        legal_moves = self._rules.legal_moves(position)
        if not legal_moves:
            raise NoLegalMovesError(
                f"Opponent asked to move with no legal moves (fen={position.fen})."
            )

        move = self._registry.select(resolved, legal_moves)
        logger.debug(
            "opponent_move_selected",
            tier=resolved.value,
            candidates=len(legal_moves),
            uci=move.uci,
            san=move.san,
        )
        return move


__all__ = ["OpponentDecisionEngine"]
