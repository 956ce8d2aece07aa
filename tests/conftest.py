"""Shared pytest fixtures and test helpers for cardball tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from cardball.config.settings import CardballSettings
from cardball.domain.errors import NotFoundError
from cardball.domain.lineup import ParticipantDefinition
from cardball.domain.roster import Player, Team
from cardball.infrastructure.store import Store
from cardball.services.telemetry import disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store(tmp_path: Path) -> Generator[Store]:
    """Store backed by a fresh SQLite database in a temp directory."""
    settings = CardballSettings.from_cli(project_root=tmp_path)
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Verbose CLI runs switch telemetry on for the whole context; switch it back off."""
    yield
    disable_telemetry()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# In-memory roster for domain tests
# ---------------------------------------------------------------------------


class InMemoryRoster:
    """Dict-backed RosterResolver."""

    def __init__(self, *teams: Team) -> None:
        self.teams: dict[int, Team] = {}
        self.players: dict[int, Player] = {}
        for team in teams:
            self.add(team)

    def add(self, team: Team) -> None:
        assert team.id is not None
        self.teams[team.id] = team
        for player in team.players:
            assert player.id is not None
            self.players[player.id] = player

    def find_team(self, team_id: int) -> Team:
        try:
            return self.teams[team_id]
        except KeyError:
            raise NotFoundError(f"Team {team_id} does not exist") from None

    def find_player(self, player_id: int) -> Player:
        try:
            return self.players[player_id]
        except KeyError:
            raise NotFoundError(f"Player {player_id} does not exist") from None


def make_team(team_id: int, nickname: str, *, first_player_id: int, size: int = 9) -> Team:
    """Build a team with *size* players numbered from *first_player_id*."""
    players = [
        Player(
            id=first_player_id + i,
            team_id=team_id,
            first_name=f"{nickname[:3]}{i}",
            last_name=nickname,
            position=i + 1,
        )
        for i in range(size)
    ]
    return Team(id=team_id, city="City", nickname=nickname, players=players)


def full_lineup(team: Team) -> list[ParticipantDefinition]:
    """Nine entries: player i bats in slot i and fields position i."""
    return [
        ParticipantDefinition(batting_order=i, fielding_position=i, player_id=p.id)
        for i, p in enumerate(team.players[:9])
    ]


# ---------------------------------------------------------------------------
# Service-level helpers
# ---------------------------------------------------------------------------


def create_team(store: Store, nickname: str, *, players: int = 9) -> dict[str, Any]:
    """Create a team with *players* players via TeamService, asserting success."""
    from cardball.services.team import TeamService

    svc = TeamService(store)
    result = svc.create_team("City", nickname)
    assert result.ok, result.error
    team_id = result.data["id"]
    for i in range(players):
        added = svc.add_player(team_id, f"{nickname}{i}", "Player", position=i + 1)
        assert added.ok, added.error
    result = svc.get_team(team_id)
    assert result.ok, result.error
    return result.data


def lineup_entries(team: dict[str, Any]) -> list[tuple[int, int, int]]:
    """Full lineup entries for a team dict returned by :func:`create_team`."""
    return [(i, i, p["id"]) for i, p in enumerate(team["players"][:9])]


def create_game(store: Store, name: str = "Opener") -> dict[str, Any]:
    """Create two teams and a game between them, asserting success."""
    from cardball.services.game import GameService

    visiting = create_team(store, "Visitors")
    home = create_team(store, "Hosts")
    result = GameService(store).create_game(name, visiting["id"], home["id"])
    assert result.ok, result.error
    return {"game": result.data, "visiting": visiting, "home": home}
