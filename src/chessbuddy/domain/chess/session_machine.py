from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterator, List, Tuple
from uuid import UUID, uuid4

import structlog

from src.chessbuddy.domain.chess.errors import (
    ConcurrentTransitionError,
    IllegalMoveError,
    SessionPhaseError,
)
from src.chessbuddy.domain.chess.opponent import OpponentDecisionEngine
from src.chessbuddy.domain.chess.rules import MoveRequest, Position, RulesEngine, Side
from src.chessbuddy.domain.chess.status import GameStatus, evaluate_status
from src.chessbuddy.domain.chess.strategies import DifficultyTier, resolve_tier

logger = structlog.get_logger("chessbuddy.session")


class SessionPhase(str, Enum):
    setup = "setup"
    active = "active"
    terminal = "terminal"


class MoveActor(str, Enum):
    human = "human"
    ai = "ai"


class RejectionReason(str, Enum):
    illegal_move = "illegal_move"
    out_of_turn = "out_of_turn"


@dataclass
class MoveRecord:
    san: str
    uci: str
    actor: MoveActor
    timestamp: datetime


@dataclass
class GameSession:
    """State of one human-versus-computer game.

    ``human_side`` and ``tier`` survive a reset and act as the defaults for
    the next ``start_game``.
    """

    id: UUID = field(default_factory=uuid4)
    phase: SessionPhase = SessionPhase.setup
    human_side: Side = Side.white
    tier: DifficultyTier = DifficultyTier.medium
    position: Position | None = None
    status: GameStatus | None = None
    started: bool = False
    moves: List[MoveRecord] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None


@dataclass(frozen=True)
class SubmissionResult:
    accepted: bool
    reason: RejectionReason | None = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def ok(cls) -> "SubmissionResult":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str) -> "SubmissionResult":
        return cls(accepted=False, reason=reason, detail=detail)


SessionListener = Callable[[GameSession], None]


class SessionStateMachine:
    """Drive a GameSession through setup, active play and the terminal phase.

    Every transition is synchronous. When a human move hands the turn to the
    computer, the reply is chosen and applied inside the same call, and the
    session is only updated once both halves are known.
    """

    def __init__(
        self,
        session: GameSession,
        rules: RulesEngine,
        decision_engine: OpponentDecisionEngine | None = None,
    ) -> None:
        self._session = session
        self._rules = rules
        self._engine = decision_engine or OpponentDecisionEngine(rules)
        self._listeners: list[SessionListener] = []
        self._in_transition = False

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def phase(self) -> SessionPhase:
        return self._session.phase

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` after every settled transition; returns an unsubscribe hook."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # Observers

    def current_position(self) -> Position | None:
        return self._session.position

    def game_status(self) -> GameStatus | None:
        return self._session.status

    def is_terminal(self) -> bool:
        return self._session.phase is SessionPhase.terminal

    def side_to_move_now(self) -> Side | None:
        if self._session.position is None:
            return None
        return self._rules.side_to_move(self._session.position)

    # Transitions

    def start_game(
        self,
        human_side: Side | str | None = None,
        tier: DifficultyTier | int | str | None = None,
    ) -> GameSession:
        with self._transition():
            session = self._session
            if session.phase is not SessionPhase.setup:
                raise SessionPhaseError(
                    f"Cannot start a game from the {session.phase.value} phase; reset first."
                )

            side = Side(human_side) if human_side is not None else session.human_side
            chosen_tier = resolve_tier(tier) if tier is not None else session.tier

            position = self._rules.starting_position()
            status = evaluate_status(self._rules, position)
            records: list[MoveRecord] = []
            if not status.is_terminal and self._rules.side_to_move(position) is not side:
                position, status, record = self._opponent_reply(position, chosen_tier)
                records.append(record)

            session.human_side = side
            session.tier = chosen_tier
            session.started = True
            session.phase = SessionPhase.active
            session.moves = []
            session.ended_at = None
            self._commit(position, status, records)

            logger.info(
                "game_started",
                session_id=str(session.id),
                human_side=side.value,
                tier=chosen_tier.value,
                opponent_opened=bool(records),
            )

        self._notify()
        return self._session

    def submit_human_move(
        self,
        source: str,
        destination: str,
        promotion: str | None = None,
    ) -> SubmissionResult:
        with self._transition():
            result = self._apply_human_move(MoveRequest(source, destination, promotion))

        if result:
            self._notify()
        return result

    def reset_game(self) -> GameSession:
        with self._transition():
            session = self._session
            previous_phase = session.phase
            session.phase = SessionPhase.setup
            session.position = None
            session.status = None
            session.started = False
            session.moves = []
            session.ended_at = None
            session.updated_at = datetime.now(timezone.utc)
            logger.info(
                "game_reset",
                session_id=str(session.id),
                previous_phase=previous_phase.value,
            )

        self._notify()
        return self._session

    # Internals

    def _apply_human_move(self, request: MoveRequest) -> SubmissionResult:
        session = self._session
        if (
            session.phase is not SessionPhase.active
            or session.position is None
            or session.status is None
            or session.status.is_terminal
        ):
            return self._reject(RejectionReason.out_of_turn, "The game is not in progress.")

        position = session.position
        if self._rules.side_to_move(position) is not session.human_side:
            return self._reject(RejectionReason.out_of_turn, "It is not the human player's turn.")

        try:
            record = self._describe_human_move(position, request)
            position = self._rules.apply_move(position, request)
        except IllegalMoveError as exc:
            return self._reject(RejectionReason.illegal_move, str(exc))

        status = evaluate_status(self._rules, position)
        records = [record]
        if not status.is_terminal and self._rules.side_to_move(position) is not session.human_side:
            position, status, reply = self._opponent_reply(position, session.tier)
            records.append(reply)

        self._commit(position, status, records)
        return SubmissionResult.ok()

    def _opponent_reply(
        self,
        position: Position,
        tier: DifficultyTier,
    ) -> Tuple[Position, GameStatus, MoveRecord]:
        move = self._engine.decide(position, tier)
        next_position = self._rules.apply_move(position, move.as_request())
        record = MoveRecord(
            san=move.san,
            uci=move.uci,
            actor=MoveActor.ai,
            timestamp=datetime.now(timezone.utc),
        )
        return next_position, evaluate_status(self._rules, next_position), record

    def _describe_human_move(self, position: Position, request: MoveRequest) -> MoveRecord:
        if not isinstance(request.source, str) or not isinstance(request.destination, str):
            raise IllegalMoveError(
                f"Squares must be given as text: {request.source!r} -> {request.destination!r}"
            )
        if request.promotion is not None and not isinstance(request.promotion, str):
            raise IllegalMoveError(f"Invalid promotion piece: {request.promotion!r}")

        source =(request.source or "").strip().lower()
        destination = (request.destination or "").strip().lower()
        promotion = (request.promotion or "").strip().lower() or None

        matches = [
            move
            for move in self._rules.legal_moves(position)
            if move.source == source
            and move.destination == destination
            and (promotion is None or move.promotion == promotion)
        ]
        if len(matches) > 1:
            # Unspecified promotion piece: the rules engine defaults to the queen.
            matches = [move for move in matches if move.promotion == "q"] or matches
        if not matches:
            raise IllegalMoveError(
                f"Move {source}{destination}{promotion or ''} is not legal in the current position."
            )
        move = matches[0]
        return MoveRecord(
            san=move.san,
            uci=move.uci,
            actor=MoveActor.human,
            timestamp=datetime.now(timezone.utc),
        )

    def _commit(
        self,
        position: Position,
        status: GameStatus,
        records: List[MoveRecord],
    ) -> None:
        session = self._session
        now = datetime.now(timezone.utc)
        session.position = position
        session.status = status
        session.moves.extend(records)
        session.updated_at = now
        if status.is_terminal:
            session.phase = SessionPhase.terminal
            session.ended_at = session.ended_at or now
            logger.info(
                "game_finished",
                session_id=str(session.id),
                status=status.kind.value,
                winner=status.winner.value if status.winner else None,
                total_moves=len(session.moves),
            )

    def _reject(self, reason: RejectionReason, detail: str) -> SubmissionResult:
        logger.info(
            "human_move_rejected",
            session_id=str(self._session.id),
            reason=reason.value,
            detail=detail,
        )
        return SubmissionResult.rejected(reason, detail)

    @contextmanager
    def _transition(self) -> Iterator[None]:
        if self._in_transition:
            raise ConcurrentTransitionError(
                f"Session {self._session.id} is already running a transition."
            )
        self._in_transition = True
        try:
            yield
        finally:
            self._in_transition = False

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)


__all__ = [
    "GameSession",
    "MoveActor",
    "MoveRecord",
    "RejectionReason",
    "SessionListener",
    "SessionPhase",
    "SessionStateMachine",
    "SubmissionResult",
]
