from __future__ import annotations

import chess
import pytest


@pytest.fixture()
def gameplay_client(app):
    return app.test_client()


@pytest.mark.parametrize("difficulty", [1, 2, 3])
def test_gameplay_flow(gameplay_client, difficulty):
    create_response = gameplay_client.post(
        "/api/v1/sessions",
        json={"playerColor": "white", "difficulty": difficulty},
    )
    assert create_response.status_code == 201
    session = create_response.get_json()
    session_id = session["id"]

    board = chess.Board(session["currentFen"])
    assert board.turn == chess.WHITE

    played = 0
    for _ in range(6):
        human_move = sorted(board.legal_moves, key=lambda move: move.uci())[0]
        move_response = gameplay_client.post(
            f"/api/v1/sessions/{session_id}/moves",
            json={"from": chess.square_name(human_move.from_square), "to": chess.square_name(human_move.to_square)},
        )
        assert move_response.status_code == 200
        payload = move_response.get_json()
        played += 1
        board = chess.Board(payload["currentFen"])
        if payload["phase"] == "terminal":
            assert payload["status"] != "in_progress"
            break
        assert payload["status"] == "in_progress"
        assert board.turn == chess.WHITE
        assert len(payload["moves"]) == 2 * played

    final_state = gameplay_client.get(f"/api/v1/sessions/{session_id}")
    assert final_state.status_code == 200
    state_payload = final_state.get_json()
    assert state_payload["id"] == session_id
    actors = [move["actor"] for move in state_payload["moves"]]
    assert actors[::2] == ["human"] * len(actors[::2])
    assert actors[1::2] == ["ai"] * len(actors[1::2])


def test_black_game_alternates_from_the_computer_opening(gameplay_client):
    create_response = gameplay_client.post(
        "/api/v1/sessions",
        json={"playerColor": "black", "difficulty": 2},
    )
    session = create_response.get_json()
    board = chess.Board(session["currentFen"])
    assert board.turn == chess.BLACK

    human_move = sorted(board.legal_moves, key=lambda move: move.uci())[0]
    response = gameplay_client.post(
        f"/api/v1/sessions/{session['id']}/moves",
        json={"from": chess.square_name(human_move.from_square), "to": chess.square_name(human_move.to_square)},
    )
    payload = response.get_json()
    assert response.status_code == 200
    assert [move["actor"] for move in payload["moves"]] == ["ai", "human", "ai"]
    assert payload["sideToMove"] == "black"
