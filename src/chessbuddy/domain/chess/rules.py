from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Protocol, Tuple

import chess

from src.chessbuddy.domain.chess.errors import IllegalMoveError

PROMOTION_SYMBOLS = {
    "q": chess.QUEEN,
    "r": chess.ROOK,
    "b": chess.BISHOP,
    "n": chess.KNIGHT,
}


class Side(str, Enum):
    white = "white"
    black = "black"

    @property
    def opponent(self) -> "Side":
        return Side.black if self is Side.white else Side.white

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> chess.Color:
        return chess.WHITE if self is Side.white else chess.BLACK

    @classmethod
    def from_color(cls, color: chess.Color) -> "Side":
        return cls.white if color == chess.WHITE else cls.black


class MoveTag(str, Enum):
    capture = "capture"
    check = "check"
    checkmate = "checkmate"
    promotion = "promotion"
    castling = "castling"
    en_passant = "en_passant"


@dataclass(frozen=True)
class Position:
    """Immutable board snapshot: a starting FEN plus the moves played from it."""

    initial_fen: str
    moves: Tuple[str, ...] = ()
    fen: str = ""

    def __post_init__(self) -> None:
        if not self.fen:
            object.__setattr__(self, "fen", self.initial_fen)

    @property
    def ply(self) -> int:
        return len(self.moves)


@dataclass(frozen=True)
class MoveRequest:
    source: str
    destination: str
    promotion: str | None = None


@dataclass(frozen=True)
class LegalMove:
    """A fully specified legal move annotated by the rules engine."""

    uci: str
    san: str
    source: str
    destination: str
    promotion: str | None = None
    tags: FrozenSet[MoveTag] = field(default_factory=frozenset)

    def as_request(self) -> MoveRequest:
        return MoveRequest(self.source, self.destination, self.promotion)


class RulesEngine(Protocol):
    """Contract the session core uses to consult the rules of chess."""

    def starting_position(self) -> Position:
        ...

    def legal_moves(self, position: Position) -> List[LegalMove]:
        ...

    def apply_move(self, position: Position, request: MoveRequest) -> Position:
        """Return the position after ``request``; raise IllegalMoveError if it is not legal."""

    def side_to_move(self, position: Position) -> Side:
        ...

    def is_checkmate(self, position: Position) -> bool:
        ...

    def is_stalemate(self, position: Position) -> bool:
        ...

    def is_threefold_repetition(self, position: Position) -> bool:
        ...

    def is_insufficient_material(self, position: Position) -> bool:
        ...

    def is_draw(self, position: Position) -> bool:
        ...


class PythonChessRulesEngine(RulesEngine):
    """Rules engine backed by python-chess boards rebuilt from each Position."""

    def __init__(self, initial_fen: str = chess.STARTING_FEN) -> None:
        # Validate eagerly so a bad FEN fails at wiring time.
        self._initial_fen = chess.Board(initial_fen).fen()

    def starting_position(self) -> Position:
        return Position(initial_fen=self._initial_fen)

    def position_from_fen(self, fen: str) -> Position:
        try:
            board = chess.Board(fen)
        except ValueError as exc:
            raise IllegalMoveError(f"Invalid FEN: {fen}") from exc
        return Position(initial_fen=board.fen())

    def legal_moves(self, position: Position) -> List[LegalMove]:
        board = self._build_board(position)
        return [self._annotate(board, move) for move in board.legal_moves]

    def apply_move(self, position: Position, request: MoveRequest) -> Position:
        board = self._build_board(position)
        move = self._resolve_request(board, request)
        board.push(move)
        return Position(
            initial_fen=position.initial_fen,
            moves=position.moves + (move.uci(),),
            fen=board.fen(),
        )

    def side_to_move(self, position: Position) -> Side:
        return Side.from_color(self._build_board(position).turn)

    def is_checkmate(self, position: Position) -> bool:
        return self._build_board(position).is_checkmate()

    def is_stalemate(self, position: Position) -> bool:
        return self._build_board(position).is_stalemate()

    def is_threefold_repetition(self, position: Position) -> bool:
        return self._build_board(position).is_repetition(3)

    def is_insufficient_material(self, position: Position) -> bool:
        return self._build_board(position).is_insufficient_material()

    def is_draw(self, position: Position) -> bool:
        board = self._build_board(position)
        return (
            board.is_stalemate()
            or board.is_insufficient_material()
            or board.is_repetition(3)
            or board.is_fifty_moves()
            or board.is_fivefold_repetition()
            or board.is_seventyfive_moves()
        )

    def render(self, position: Position, *, orientation: Side = Side.white) -> str:
        board = self._build_board(position)
        rendered = str(board)
        if orientation is Side.black:
            rendered = "\n".join(line[::-1] for line in reversed(rendered.splitlines()))
        return rendered

    def _resolve_request(self, board: chess.Board, request: MoveRequest) -> chess.Move:
        try:
            from_square = chess.parse_square(request.source.strip().lower())
            to_square = chess.parse_square(request.destination.strip().lower())
        except (AttributeError, ValueError) as exc:
            raise IllegalMoveError(
                f"Invalid squares: {request.source!r} -> {request.destination!r}"
            ) from exc

        if request.promotion:
            piece_type = PROMOTION_SYMBOLS.get(request.promotion.strip().lower())
            if piece_type is None:
                raise IllegalMoveError(f"Invalid promotion piece: {request.promotion!r}")
            candidates = [chess.Move(from_square, to_square, promotion=piece_type)]
        else:
            candidates = [
                chess.Move(from_square, to_square),
                chess.Move(from_square, to_square, promotion=chess.QUEEN),
            ]

        for move in candidates:
            if move in board.legal_moves:
                return move
        raise IllegalMoveError(
            f"Move {chess.square_name(from_square)}{chess.square_name(to_square)} "
            "is not legal in the current position."
        )

    def _annotate(self, board: chess.Board, move: chess.Move) -> LegalMove:
        tags: set[MoveTag] = set()
        if board.is_capture(move):
            tags.add(MoveTag.capture)
        if board.is_en_passant(move):
            tags.add(MoveTag.en_passant)
        if board.is_castling(move):
            tags.add(MoveTag.castling)
        if move.promotion is not None:
            tags.add(MoveTag.promotion)
        if board.gives_check(move):
            tags.add(MoveTag.check)
            board.push(move)
            if board.is_checkmate():
                tags.add(MoveTag.checkmate)
            board.pop()

        return LegalMove(
            uci=move.uci(),
            san=board.san(move),
            source=chess.square_name(move.from_square),
            destination=chess.square_name(move.to_square),
            promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
            tags=frozenset(tags),
        )

    def _build_board(self, position: Position) -> chess.Board:
        board = chess.Board(position.initial_fen)
        for uci in position.moves:
            board.push(chess.Move.from_uci(uci))
        return board


__all__ = [
    "LegalMove",
    "MoveRequest",
    "MoveTag",
    "Position",
    "PythonChessRulesEngine",
    "RulesEngine",
    "Side",
]
