from __future__ import annotations


class ChessBuddyError(Exception):
    """Base class for ChessBuddy domain errors."""

    code: str = "chessbuddy_error"


class SessionError(ChessBuddyError):
    """Base class for session-related domain errors."""

    code = "session_error"


class SessionNotFoundError(SessionError):
    code = "session_not_found"


class IllegalMoveError(SessionError):
    code = "illegal_move"


class OutOfTurnError(SessionError):
    code = "out_of_turn"


class SessionCompletedError(OutOfTurnError):
    code = "session_completed"


class SessionPhaseError(SessionError):
    """Raised when a transition is requested from a phase that does not allow it."""

    code = "invalid_phase"


class ConcurrentTransitionError(SessionError):
    """Raised when a transition is re-entered while one is still running."""

    code = "concurrent_transition"


class UnknownTierError(ChessBuddyError, ValueError):
    code = "unknown_tier"


class NoLegalMovesError(ChessBuddyError, RuntimeError):
    """The opponent was asked to move in a position without legal moves.

    Callers check the game status before asking for a move, so this always
    points at a wiring bug.
    """

    code = "no_legal_moves"


__all__ = [
    "ChessBuddyError",
    "ConcurrentTransitionError",
    "IllegalMoveError",
    "NoLegalMovesError",
    "OutOfTurnError",
    "SessionCompletedError",
    "SessionError",
    "SessionNotFoundError",
    "SessionPhaseError",
    "UnknownTierError",
]
