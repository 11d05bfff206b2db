from __future__ import annotations

import random

import click

from src.chessbuddy.domain.chess import (
    DifficultyTier,
    GameSession,
    MoveActor,
    OpponentDecisionEngine,
    PythonChessRulesEngine,
    SessionStateMachine,
    Side,
    StrategyRegistry,
    resolve_tier,
)
from src.chessbuddy.infrastructure.config import load_config
from src.chessbuddy.interface.telemetry.logging import setup_logging


def _parse_coordinates(text: str) -> tuple[str, str, str | None] | None:
    """Split ``e2e4`` / ``e7e8n`` into source, destination and promotion."""
    cleaned = text.strip().lower().replace("-", "")
    if len(cleaned) not in (4, 5):
        return None
    promotion = cleaned[4] if len(cleaned) == 5 else None
    return cleaned[:2], cleaned[2:4], promotion


def _show(machine: SessionStateMachine, rules: PythonChessRulesEngine) -> None:
    session = machine.session
    position = machine.current_position()
    if position is None:
        return
    click.echo(rules.render(position, orientation=session.human_side))
    if session.moves and session.moves[-1].actor is MoveActor.ai:
        click.echo(f"Computer played {session.moves[-1].san}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--color",
    type=click.Choice([side.value for side in Side]),
    default=None,
    help="Side you play; defaults to DEFAULT_PLAYER_COLOR.",
)
@click.option(
    "--difficulty",
    type=click.IntRange(min(DifficultyTier).value, max(DifficultyTier).value),
    default=None,
    help="1 = Easy, 2 = Medium, 3 = Hard; defaults to DEFAULT_DIFFICULTY.",
)
@click.option("--seed", type=int, default=None, help="Seed the computer's random choices.")
def main(color: str | None, difficulty: int | None, seed: int | None) -> None:
    """Play a game against the computer in the terminal."""
    config = load_config()
    setup_logging(config.additional.get("STRUCTLOG_LEVEL", "WARNING"), json=False)

    seed = seed if seed is not None else config.opponent_seed
    rules = PythonChessRulesEngine()
    rng = random.Random(seed) if seed is not None else None
    engine = OpponentDecisionEngine(rules, StrategyRegistry(rng=rng))
    session = GameSession(
        human_side=Side(color or config.default_player_color),
        tier=resolve_tier(difficulty or config.default_difficulty),
    )
    machine = SessionStateMachine(session, rules, engine)
    machine.subscribe(lambda _: _show(machine, rules))

    click.secho(
        f"You play {session.human_side.label} at {session.tier.description} difficulty. "
        "Enter moves like e2e4 or e7e8n; 'reset' starts over, 'quit' exits.",
        fg="cyan",
    )
    machine.start_game()

    while True:
        if machine.is_terminal():
            status = machine.game_status()
            click.secho(status.message if status else "Game over.", fg="green", bold=True)
            if not click.confirm("Play again?", default=True):
                break
            machine.reset_game()
            machine.start_game()
            continue

        command = click.prompt("Your move", type=str).strip().lower()
        if command in {"quit", "exit"}:
            break
        if command == "reset":
            machine.reset_game()
            machine.start_game()
            continue

        parsed = _parse_coordinates(command)
        if parsed is None:
            click.secho("Use coordinate notation, for example e2e4.", fg="yellow")
            continue

        result = machine.submit_human_move(*parsed)
        if not result:
            click.secho(f"Rejected ({result.reason.value}): {result.detail}", fg="red")


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["main"]
