from __future__ import annotations

from threading import Lock
from uuid import UUID

from src.chessbuddy.domain.chess import GameSession, GameSessionRepository


class InMemoryGameSessionRepository(GameSessionRepository):
    """Process-local session store; sessions do not survive a restart."""

    def __init__(self) -> None:
        self._sessions: dict[UUID, GameSession] = {}
        self._lock = Lock()

    def create(self, session_entity: GameSession) -> GameSession:
        with self._lock:
            if session_entity.id in self._sessions:
                raise ValueError(f"Session {session_entity.id} already exists.")
            self._sessions[session_entity.id] = session_entity
        return session_entity

    def get(self, session_id: UUID) -> GameSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def save(self, session_entity: GameSession) -> GameSession:
        with self._lock:
            if session_entity.id not in self._sessions:
                raise ValueError(f"Session {session_entity.id} not found.")
            self._sessions[session_entity.id] = session_entity
        return session_entity

    def delete(self, session_id: UUID) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["InMemoryGameSessionRepository"]
