from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Iterator, Protocol
from uuid import UUID

from src.chessbuddy.domain.chess.errors import (
    IllegalMoveError,
    OutOfTurnError,
    SessionCompletedError,
    SessionNotFoundError,
)
from src.chessbuddy.domain.chess.opponent import OpponentDecisionEngine
from src.chessbuddy.domain.chess.rules import RulesEngine, Side
from src.chessbuddy.domain.chess.session_machine import (
    GameSession,
    RejectionReason,
    SessionPhase,
    SessionStateMachine,
)
from src.chessbuddy.domain.chess.strategies import DifficultyTier


class GameSessionRepository(Protocol):
    """Storage contract for session entities."""

    def create(self, session: GameSession) -> GameSession:
        ...

    def get(self, session_id: UUID) -> GameSession | None:
        ...

    def save(self, session: GameSession) -> GameSession:
        ...

    def delete(self, session_id: UUID) -> bool:
        ...


class SessionManager:
    """Coordinate many independent sessions, one transition at a time per session."""

    def __init__(
        self,
        repository: GameSessionRepository,
        rules: RulesEngine,
        decision_engine: OpponentDecisionEngine | None = None,
        *,
        default_side: Side = Side.white,
        default_tier: DifficultyTier = DifficultyTier.medium,
    ) -> None:
        self._repository = repository
        self._rules = rules
        self._engine = decision_engine or OpponentDecisionEngine(rules)
        self._default_side = default_side
        self._default_tier = default_tier
        self._locks: dict[UUID, Lock] = {}
        self._locks_guard = Lock()

    @property
    def tiers(self) -> list[DifficultyTier]:
        return self._engine.registry.tiers

    def create_session(
        self,
        *,
        player_color: Side | str | None = None,
        difficulty: DifficultyTier | int | str | None = None,
    ) -> GameSession:
        session = GameSession(human_side=self._default_side, tier=self._default_tier)
        machine = self._machine(session)
        machine.start_game(player_color, difficulty)
        return self._repository.create(session)

    def get_session(self, session_id: UUID) -> GameSession:
        session = self._repository.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found.")
        return session

    def submit_move(
        self,
        session_id: UUID,
        source: str,
        destination: str,
        promotion: str | None = None,
    ) -> GameSession:
        with self._locked(session_id):
            session = self.get_session(session_id)
            if session.phase is SessionPhase.terminal:
                raise SessionCompletedError(f"Session {session_id} already completed.")

            result = self._machine(session).submit_human_move(source, destination, promotion)
            if result.reason is RejectionReason.illegal_move:
                raise IllegalMoveError(result.detail)
            if result.reason is RejectionReason.out_of_turn:
                raise OutOfTurnError(result.detail)
            return self._repository.save(session)

    def reset_session(self, session_id: UUID) -> GameSession:
        with self._locked(session_id):
            session = self.get_session(session_id)
            self._machine(session).reset_game()
            return self._repository.save(session)

    def start_session(
        self,
        session_id: UUID,
        *,
        player_color: Side | str | None = None,
        difficulty: DifficultyTier | int | str | None = None,
    ) -> GameSession:
        with self._locked(session_id):
            session = self.get_session(session_id)
            self._machine(session).start_game(player_color, difficulty)
            return self._repository.save(session)

    def delete_session(self, session_id: UUID) -> None:
        with self._locked(session_id):
            if not self._repository.delete(session_id):
                raise SessionNotFoundError(f"Session {session_id} not found.")
        with self._locks_guard:
            self._locks.pop(session_id, None)

    def side_to_move(self, session: GameSession) -> Side | None:
        return self._machine(session).side_to_move_now()

    def _machine(self, session: GameSession) -> SessionStateMachine:
        return SessionStateMachine(session, self._rules, self._engine)

    @contextmanager
    def _locked(self, session_id: UUID) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                # Only sessions that exist get a lock entry.
                self.get_session(session_id)
                lock = self._locks[session_id] = Lock()
        with lock:
            yield


__all__ = ["GameSessionRepository", "SessionManager"]
