"""Command group: games — lineups, strategy, and the action log."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

import click
import pydantic

from cardball.commands._base import CardballGroup
from cardball.domain.actions import ActionSubmission
from cardball.domain.lineup import LineupDefinition
from cardball.domain.types import Role, Side
from cardball.services.game import GameService
from cardball.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from cardball.commands._context import AppContext


def _read_json(app: AppContext, op: str, stream: IO[str]) -> Any | None:
    """Load JSON from *stream*, emitting a failure result if it is unreadable."""
    try:
        return json.load(stream)
    except (json.JSONDecodeError, OSError) as exc:
        app.emit(
            ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="INVALID_FILE",
                    message=f"Error reading {stream.name}: {exc}",
                ),
            )
        )
        return None


def _emit_invalid(app: AppContext, op: str, exc: pydantic.ValidationError) -> None:
    app.emit(
        ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="INVALID_FORMAT",
                message=f"Invalid {op.replace('_', ' ')} payload",
                detail={"errors": exc.errors(include_url=False, include_context=False)},
            ),
        )
    )


_GAME_EXAMPLES = """\
  cardball game create "Opener" --visiting 1 --home 2
  cardball game put-lineup 1 home lineup.json
  cardball game strategy 1 home-manager "Hit and run with a runner on first"
  cardball game action 1 strikeout.json
  cardball game action 1 passed-ball.json --parent 1
  cardball game status 1"""


@click.group(cls=CardballGroup, examples=_GAME_EXAMPLES)
def game() -> None:
    """Create games and record lineups, strategy, and plays."""


@game.command("create")
@click.argument("name")
@click.option("--visiting", "visiting_team_id", type=int, required=True, help="Visiting team ID.")
@click.option("--home", "home_team_id", type=int, required=True, help="Home team ID.")
@click.pass_obj
def create_game(app: AppContext, name: str, visiting_team_id: int, home_team_id: int) -> None:
    """Create a game between two teams."""
    app.emit(GameService(app.store).create_game(name, visiting_team_id, home_team_id))


@game.command("list")
@click.pass_obj
def list_games(app: AppContext) -> None:
    """List all games with their status."""
    app.emit(GameService(app.store).list_games())


@game.command("get")
@click.argument("game_id", type=int)
@click.pass_obj
def get_game(app: AppContext, game_id: int) -> None:
    """Show a game: teams, lineups, strategies, and the action tree."""
    app.emit(GameService(app.store).get_game(game_id))


@game.command("status")
@click.argument("game_id", type=int)
@click.pass_obj
def game_status(app: AppContext, game_id: int) -> None:
    """Show a game's derived status."""
    app.emit(GameService(app.store).get_status(game_id))


@game.command("lineup")
@click.argument("game_id", type=int)
@click.pass_obj
def lineup(app: AppContext, game_id: int) -> None:
    """Show both lineups in batting order."""
    app.emit(GameService(app.store).list_lineups(game_id))


@game.command(
    "put-lineup",
    examples="""\
  cardball game put-lineup 1 visiting lineup.json
  echo '{"participants": [{"batting_order": 0, "fielding_position": 5, "player_id": 7}]}' \\
    | cardball game put-lineup 1 home -""",
)
@click.argument("game_id", type=int)
@click.argument("side", type=click.Choice([s.value for s in Side], case_sensitive=False))
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def put_lineup(app: AppContext, game_id: int, side: str, file: IO[str]) -> None:
    """Replace a side's lineup from a JSON file ('-' for stdin).

    FILE holds {"participants": [...]} or a bare array. Each entry has
    batting_order (0-8), fielding_position (0-8), and player_id.
    """
    raw = _read_json(app, "put_lineup", file)
    if raw is None:
        return
    if isinstance(raw, list):
        raw = {"participants": raw}
    try:
        definition = LineupDefinition.model_validate(raw)
    except pydantic.ValidationError as exc:
        _emit_invalid(app, "put_lineup", exc)
        return
    app.emit(GameService(app.store).put_lineup(game_id, side, definition.participants))


@game.command("strategy")
@click.argument("game_id", type=int)
@click.argument("role", type=click.Choice([r.value for r in Role], case_sensitive=False))
@click.argument("strategy")
@click.pass_obj
def strategy(app: AppContext, game_id: int, role: str, strategy: str) -> None:
    """Post the current strategy for a manager role."""
    app.emit(GameService(app.store).post_strategy(game_id, role, strategy))


@game.command(
    "action",
    examples="""\
  cardball game action 1 play.json
  echo '{"play": "PB", "runs": 1, "bases_advanced": 2}' | cardball game action 1 - --parent 1""",
)
@click.argument("game_id", type=int)
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.option("--parent", "parent_id", type=int, default=None, help="Parent action record ID.")
@click.pass_obj
def action(app: AppContext, game_id: int, file: IO[str], parent_id: int | None) -> None:
    """Record an action from a JSON file ('-' for stdin).

    The object may carry a "results" array of nested result actions.
    """
    raw = _read_json(app, "record_action", file)
    if raw is None:
        return
    try:
        submission = ActionSubmission.model_validate(raw)
    except pydantic.ValidationError as exc:
        _emit_invalid(app, "record_action", exc)
        return
    app.emit(GameService(app.store).record_action(game_id, submission, parent_id=parent_id))


@game.command("complete")
@click.argument("game_id", type=int)
@click.pass_obj
def complete(app: AppContext, game_id: int) -> None:
    """Mark a game as completed."""
    app.emit(GameService(app.store).complete_game(game_id))


@game.command("demo")
@click.pass_obj
def demo(app: AppContext) -> None:
    """Create demo teams and a game with a strikeout/passed-ball chain."""
    app.emit(GameService(app.store).create_demo())
