"""Command group: roster management (teams and players)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cardball.commands._base import CardballGroup
from cardball.services.team import TeamService

if TYPE_CHECKING:
    from cardball.commands._context import AppContext

_TEAM_EXAMPLES = """\
  cardball team create Colorado Rockies --manager-first Ned --manager-last Gladstone
  cardball team add-player 1 Todd Helton --year 2003 --position 3 --bats L --average 308
  cardball team get 1
  cardball team list"""


@click.group(cls=CardballGroup, examples=_TEAM_EXAMPLES)
def team() -> None:
    """Create and inspect teams and their players."""


@team.command("create")
@click.argument("city")
@click.argument("nickname")
@click.option("--manager-first", default="", help="Manager's first name.")
@click.option("--manager-last", default="", help="Manager's last name.")
@click.pass_obj
def create_team(
    app: AppContext,
    city: str,
    nickname: str,
    manager_first: str,
    manager_last: str,
) -> None:
    """Create a team."""
    svc = TeamService(app.store)
    app.emit(
        svc.create_team(
            city,
            nickname,
            manager_first_name=manager_first,
            manager_last_name=manager_last,
        )
    )


@team.command(
    "add-player",
    examples="""\
  cardball team add-player 1 Larry Walker --year 1998 --position 9 --bats L --throws R""",
)
@click.argument("team_id", type=int)
@click.argument("first_name")
@click.argument("last_name")
@click.option("--year", type=int, default=None, help="Card year.")
@click.option("--position", type=int, default=None, help="Scorecard position (1-9).")
@click.option("--bats", type=click.Choice(["R", "L", "S"]), default=None)
@click.option("--throws", type=click.Choice(["R", "L"]), default=None)
@click.option("--average", type=int, default=None, help="Batting average x 1000.")
@click.option("--contact", "contact_rating", type=int, default=None, help="Contact rating.")
@click.option("--power", "power_rating", type=int, default=None, help="Power rating.")
@click.pass_obj
def add_player(
    app: AppContext,
    team_id: int,
    first_name: str,
    last_name: str,
    year: int | None,
    position: int | None,
    bats: str | None,
    throws: str | None,
    average: int | None,
    contact_rating: int | None,
    power_rating: int | None,
) -> None:
    """Add a player card to a team."""
    svc = TeamService(app.store)
    app.emit(
        svc.add_player(
            team_id,
            first_name,
            last_name,
            year=year,
            position=position,
            bats=bats,
            throws=throws,
            average=average,
            contact_rating=contact_rating,
            power_rating=power_rating,
        )
    )


@team.command("get")
@click.argument("team_id", type=int)
@click.pass_obj
def get_team(app: AppContext, team_id: int) -> None:
    """Show a team and its roster."""
    app.emit(TeamService(app.store).get_team(team_id))


@team.command("list")
@click.pass_obj
def list_teams(app: AppContext) -> None:
    """List all teams."""
    app.emit(TeamService(app.store).list_teams())
