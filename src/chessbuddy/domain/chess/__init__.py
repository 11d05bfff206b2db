from .errors import (
    ChessBuddyError,
    ConcurrentTransitionError,
    IllegalMoveError,
    NoLegalMovesError,
    OutOfTurnError,
    SessionCompletedError,
    SessionError,
    SessionNotFoundError,
    SessionPhaseError,
    UnknownTierError,
)
from .notation import CENTER_SQUARES, MoveTraits, classify
from .opponent import OpponentDecisionEngine
from .rules import LegalMove, MoveRequest, MoveTag, Position, PythonChessRulesEngine, RulesEngine, Side
from .session_machine import (
    GameSession,
    MoveActor,
    MoveRecord,
    RejectionReason,
    SessionPhase,
    SessionStateMachine,
    SubmissionResult,
)
from .session_manager import GameSessionRepository, SessionManager
from .status import GameStatus, StatusKind, evaluate_status
from .strategies import DifficultyTier, StrategyRegistry, resolve_tier, select

__all__ = [
    "CENTER_SQUARES",
    "ChessBuddyError",
    "ConcurrentTransitionError",
    "DifficultyTier",
    "GameSession",
    "GameSessionRepository",
    "GameStatus",
    "IllegalMoveError",
    "LegalMove",
    "MoveActor",
    "MoveRecord",
    "MoveRequest",
    "MoveTag",
    "MoveTraits",
    "NoLegalMovesError",
    "OpponentDecisionEngine",
    "OutOfTurnError",
    "Position",
    "PythonChessRulesEngine",
    "RejectionReason",
    "RulesEngine",
    "SessionCompletedError",
    "SessionError",
    "SessionManager",
    "SessionNotFoundError",
    "SessionPhase",
    "SessionPhaseError",
    "SessionStateMachine",
    "Side",
    "StatusKind",
    "StrategyRegistry",
    "SubmissionResult",
    "UnknownTierError",
    "classify",
    "evaluate_status",
    "resolve_tier",
    "select",
]
