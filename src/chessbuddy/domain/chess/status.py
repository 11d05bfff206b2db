from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.chessbuddy.domain.chess.rules import Position, RulesEngine, Side


class StatusKind(str, Enum):
    in_progress = "in_progress"
    checkmate = "checkmate"
    stalemate = "stalemate"
    draw_by_repetition = "draw_by_repetition"
    draw_by_material = "draw_by_material"
    draw_other = "draw_other"


_MESSAGES = {
    StatusKind.in_progress: "",
    StatusKind.stalemate: "Stalemate!",
    StatusKind.draw_by_repetition: "Draw by threefold repetition!",
    StatusKind.draw_by_material: "Draw by insufficient material!",
    StatusKind.draw_other: "Draw!",
}


@dataclass(frozen=True)
class GameStatus:
    """Outcome classification of a position; ``winner`` is only set on checkmate."""

    kind: StatusKind
    winner: Side | None = None

    @classmethod
    def in_progress(cls) -> "GameStatus":
        return cls(StatusKind.in_progress)

    @classmethod
    def checkmate_win(cls, winner: Side) -> "GameStatus":
        return cls(StatusKind.checkmate, winner)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not StatusKind.in_progress

    @property
    def message(self) -> str:
        if self.kind is StatusKind.checkmate and self.winner is not None:
            return f"{self.winner.label} wins by checkmate!"
        return _MESSAGES[self.kind]


def evaluate_status(rules: RulesEngine, position: Position) -> GameStatus:
    """Classify ``position`` from scratch using the rules engine's predicates."""
    if rules.is_checkmate(position):
        return GameStatus.checkmate_win(rules.side_to_move(position).opponent)
    if rules.is_stalemate(position):
        return GameStatus(StatusKind.stalemate)
    if rules.is_threefold_repetition(position):
        return GameStatus(StatusKind.draw_by_repetition)
    if rules.is_insufficient_material(position):
        return GameStatus(StatusKind.draw_by_material)
    if rules.is_draw(position):
        return GameStatus(StatusKind.draw_other)
    return GameStatus.in_progress()


__all__ = ["GameStatus", "StatusKind", "evaluate_status"]
