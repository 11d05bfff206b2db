from __future__ import annotations

from dataclasses import dataclass

from src.chessbuddy.domain.chess.rules import LegalMove, MoveTag

CENTER_SQUARES = frozenset({"d4", "e4", "d5", "e5"})


@dataclass(frozen=True)
class MoveTraits:
    """Heuristic features read off a legal move's annotation."""

    is_capture: bool = False
    is_check: bool = False
    destination: str = ""

    @property
    def is_central(self) -> bool:
        return self.destination in CENTER_SQUARES


def classify(move: LegalMove) -> MoveTraits:
    tags = move.tags or frozenset()
    return MoveTraits(
        is_capture=MoveTag.capture in tags,
        # A mating move is a check even if the engine only tagged the mate.
        is_check=MoveTag.check in tags or MoveTag.checkmate in tags,
        destination=(move.destination or "").lower(),
    )


__all__ = ["CENTER_SQUARES", "MoveTraits", "classify"]
