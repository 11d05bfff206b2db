from __future__ import annotations

from src.chessbuddy.domain.chess import LegalMove, MoveTag, classify


def _move(uci: str, san: str, *tags: MoveTag) -> LegalMove:
    return LegalMove(
        uci=uci,
        san=san,
        source=uci[:2],
        destination=uci[2:4],
        tags=frozenset(tags),
    )


def test_plain_move_defaults_to_quiet() -> None:
    traits = classify(_move("g1f3", "Nf3"))
    assert traits.is_capture is False
    assert traits.is_check is False
    assert traits.destination == "f3"
    assert traits.is_central is False


def test_capture_and_check_tags_are_reported() -> None:
    traits = classify(_move("e4d5", "exd5+", MoveTag.capture, MoveTag.check))
    assert traits.is_capture is True
    assert traits.is_check is True
    assert traits.is_central is True


def test_checkmate_counts_as_check() -> None:
    traits = classify(_move("d8h4", "Qh4#", MoveTag.checkmate))
    assert traits.is_check is True


def test_central_flag_uses_destination_not_notation_text() -> None:
    # The source square e4 is central, but the knight lands on g5.
    traits = classify(_move("e4g5", "Ng5"))
    assert traits.destination == "g5"
    assert traits.is_central is False
