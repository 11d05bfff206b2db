from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from flask import Blueprint, current_app, jsonify, request

from src.chessbuddy.domain.chess import (
    GameSession,
    IllegalMoveError,
    OutOfTurnError,
    SessionCompletedError,
    SessionManager,
    SessionNotFoundError,
    SessionPhaseError,
    Side,
    UnknownTierError,
    resolve_tier,
)
from src.chessbuddy.interface.telemetry.logging import bind_trace, get_logger

gameplay_bp = Blueprint("gameplay", __name__)
logger = get_logger("chessbuddy.api.sessions")


def _session_manager() -> SessionManager:
    return current_app.extensions["session_manager"]


def _serialize_session(session: GameSession, trace_id: str | None = None) -> dict[str, Any]:
    side_to_move = _session_manager().side_to_move(session)
    status = session.status
    return {
        "id": str(session.id),
        "phase": session.phase.value,
        "status": status.kind.value if status else None,
        "statusMessage": status.message if status else "",
        "winner": status.winner.value if status and status.winner else None,
        "playerColor": session.human_side.value,
        "difficulty": session.tier.value,
        "difficultyDescription": session.tier.description,
        "started": session.started,
        "currentFen": session.position.fen if session.position else None,
        "sideToMove": side_to_move.value if side_to_move else None,
        "moves": [
            {
                "san": move.san,
                "uci": move.uci,
                "actor": move.actor.value,
                "timestamp": move.timestamp.isoformat(),
            }
            for move in session.moves
        ],
        "startedAt": session.created_at.isoformat(),
        "updatedAt": session.updated_at.isoformat(),
        "endedAt": session.ended_at.isoformat() if session.ended_at else None,
        "traceId": trace_id,
    }


def _domain_error(code: str, message: str, status: int = 400, detail: Any | None = None):
    payload: dict[str, Any] = {"code": code, "message": message}
    if detail is not None:
        payload["detail"] = detail
    return jsonify(payload), status


def _parse_setup(payload: dict[str, Any]):
    """Validate optional playerColor/difficulty; returns (color, tier, error_response)."""
    color = payload.get("playerColor")
    if color is not None:
        try:
            color = Side(color)
        except ValueError:
            return None, None, _domain_error("invalid_color", "playerColor must be 'white' or 'black'.")

    difficulty = payload.get("difficulty")
    if difficulty is not None:
        try:
            difficulty = resolve_tier(difficulty)
        except UnknownTierError:
            return None, None, _domain_error("invalid_difficulty", "difficulty must be 1, 2 or 3.")

    return color, difficulty, None


def _parse_session_id(session_id: str) -> UUID | None:
    try:
        return UUID(session_id)
    except ValueError:
        return None


@gameplay_bp.post("")
def create_session():
    payload = request.get_json(silent=True) or {}
    trace_id = request.headers.get("X-Trace-Id") or uuid4().hex
    log = bind_trace(logger, trace_id)

    color, difficulty, error = _parse_setup(payload)
    if error is not None:
        return error

    session = _session_manager().create_session(player_color=color, difficulty=difficulty)

    log.info(
        "session_created",
        session_id=str(session.id),
        player_color=session.human_side.value,
        difficulty=session.tier.value,
    )
    return jsonify(_serialize_session(session, trace_id=trace_id)), 201


@gameplay_bp.get("/<session_id>")
def get_session(session_id: str):
    trace_id = request.headers.get("X-Trace-Id") or uuid4().hex
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _domain_error("invalid_session_id", "sessionId must be a valid UUID.", status=400)

    try:
        session = _session_manager().get_session(session_uuid)
    except SessionNotFoundError:
        log.warning("session_not_found")
        return _domain_error("session_not_found", "Session not found.", status=404)

    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.post("/<session_id>/moves")
def submit_move(session_id: str):
    payload = request.get_json(silent=True) or {}
    trace_id = request.headers.get("X-Trace-Id") or uuid4().hex
    log = bind_trace(logger, trace_id, session_id=session_id)

    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _domain_error("invalid_session_id", "sessionId must be a valid UUID.", status=400)

    source = payload.get("from")
    destination = payload.get("to")
    promotion = payload.get("promotion")
    if not isinstance(source, str) or not isinstance(destination, str):
        return _domain_error("invalid_move", "from and to must be provided as strings.", status=400)
    if promotion is not None and not isinstance(promotion, str):
        return _domain_error("invalid_move", "promotion must be a string when provided.", status=400)

    try:
        session = _session_manager().submit_move(session_uuid, source, destination, promotion)
    except SessionNotFoundError:
        log.warning("session_not_found")
        return _domain_error("session_not_found", "Session not found.", status=404)
    except SessionCompletedError as exc:
        log.warning("move_after_completion", reason=str(exc))
        return _domain_error("session_completed", "Session already completed.", status=409)
    except OutOfTurnError as exc:
        log.warning("out_of_turn_rejected", detail=str(exc))
        return _domain_error("out_of_turn", str(exc), status=409)
    except IllegalMoveError as exc:
        log.warning("illegal_move_rejected", source=source, destination=destination, detail=str(exc))
        return _domain_error("illegal_move", str(exc), status=409)

    log.info(
        "move_accepted",
        source=source,
        destination=destination,
        total_moves=len(session.moves),
        status=session.status.kind.value if session.status else None,
    )
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.post("/<session_id>/reset")
def reset_session(session_id: str):
    trace_id = request.headers.get("X-Trace-Id") or uuid4().hex
    log = bind_trace(logger, trace_id, session_id=session_id)

    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _domain_error("invalid_session_id", "sessionId must be a valid UUID.", status=400)

    try:
        session = _session_manager().reset_session(session_uuid)
    except SessionNotFoundError:
        log.warning("session_not_found")
        return _domain_error("session_not_found", "Session not found.", status=404)

    log.info("session_reset")
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.post("/<session_id>/start")
def start_session(session_id: str):
    payload = request.get_json(silent=True) or {}
    trace_id = request.headers.get("X-Trace-Id") or uuid4().hex
    log = bind_trace(logger, trace_id, session_id=session_id)

    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _domain_error("invalid_session_id", "sessionId must be a valid UUID.", status=400)

    color, difficulty, error = _parse_setup(payload)
    if error is not None:
        return error

    try:
        session = _session_manager().start_session(
            session_uuid,
            player_color=color,
            difficulty=difficulty,
        )
    except SessionNotFoundError:
        log.warning("session_not_found")
        return _domain_error("session_not_found", "Session not found.", status=404)
    except SessionPhaseError as exc:
        log.warning("start_rejected", reason=str(exc))
        return _domain_error("invalid_phase", str(exc), status=409)

    log.info(
        "session_started",
        player_color=session.human_side.value,
        difficulty=session.tier.value,
    )
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.delete("/<session_id>")
def delete_session(session_id: str):
    trace_id = request.headers.get("X-Trace-Id") or uuid4().hex
    log = bind_trace(logger, trace_id, session_id=session_id)

    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _domain_error("invalid_session_id", "sessionId must be a valid UUID.", status=400)

    try:
        _session_manager().delete_session(session_uuid)
    except SessionNotFoundError:
        log.warning("session_not_found")
        return _domain_error("session_not_found", "Session not found.", status=404)

    log.info("session_deleted")
    return "", 204


__all__ = ["gameplay_bp"]
