"""Tests for the team command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from cardball.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestTeamCommands:
    def test_create(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "team", "create", "Colorado", "Rockies", "--manager-first", "Ned"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["name"] == "Colorado Rockies"
        assert data["data"]["manager"] == "Ned"

    def test_create_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["team", "create", "Philadelphia", "Phillies"])
        assert result.exit_code == 0
        assert "Philadelphia Phillies" in result.output

    def test_add_player_and_get(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["team", "create", "Colorado", "Rockies"])
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "team",
                "add-player",
                "1",
                "Todd",
                "Helton",
                "--year",
                "2003",
                "--position",
                "3",
                "--bats",
                "L",
                "--average",
                "308",
            ],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["name"] == "Todd Helton"

        result = cli_runner.invoke(cli, ["--json", "team", "get", "1"])
        players = json.loads(result.output)["data"]["players"]
        assert players[0]["bats"] == "L"
        assert players[0]["year"] == 2003

    def test_add_player_unknown_team(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "team", "add-player", "9", "No", "Body"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NOT_FOUND"

    def test_bad_bats_choice(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["team", "add-player", "1", "A", "B", "--bats", "X"])
        assert result.exit_code == 2

    def test_list_quiet(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["team", "create", "Colorado", "Rockies"])
        cli_runner.invoke(cli, ["team", "create", "Philadelphia", "Phillies"])
        result = cli_runner.invoke(cli, ["-q", "team", "list"])
        assert result.exit_code == 0
        assert result.output.split() == ["1", "2"]
