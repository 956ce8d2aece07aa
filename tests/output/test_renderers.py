"""Tests for the Rich renderers."""

from typing import Any

from cardball.domain.errors import ValidationError
from cardball.output.renderers import render_quiet, render_result
from cardball.services.result import ServiceResult


def _lineup() -> list[dict[str, Any]]:
    return [
        {
            "batting_order": 0,
            "fielding_position": 5,
            "position": "SS",
            "player_id": 12,
            "player": "Larry Bowa",
        }
    ]


class TestRenderQuiet:
    def test_items(self) -> None:
        result = ServiceResult(
            ok=True, op="list_games", data={"items": [{"id": 1}, {"id": 2}], "count": 2}
        )
        assert render_quiet(result) == "1\n2"

    def test_action_id_preferred(self) -> None:
        result = ServiceResult(ok=True, op="record_action", data={"id": 3, "action_id": 0})
        assert render_quiet(result) == "0"

    def test_fallback(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="noop")) == "OK: noop"

    def test_error(self) -> None:
        result = ServiceResult.failure("put_lineup", ValidationError("slot taken"))
        assert render_quiet(result) == "ERROR: put_lineup — slot taken"


class TestRenderResult:
    def test_error_detail_when_verbose(self) -> None:
        result = ServiceResult.failure(
            "put_lineup", ValidationError("slot taken", batting_order=2)
        )
        out = render_result(result, verbose=True)
        assert "ERROR" in out
        assert "batting_order: 2" in out

    def test_mutation_shows_lineup(self) -> None:
        result = ServiceResult(
            ok=True,
            op="put_lineup",
            data={"id": 1, "side": "home", "lineup": _lineup(), "status": "forming"},
        )
        out = render_result(result)
        assert "put_lineup" in out
        assert "Larry Bowa" in out
        assert "SS" in out

    def test_game_panel_and_action_tree(self) -> None:
        data = {
            "id": 1,
            "name": "Opener",
            "visiting_team": {"id": 1, "name": "Philadelphia Phillies"},
            "home_team": {"id": 2, "name": "Colorado Rockies"},
            "status": "in_progress",
            "lineups": {"visiting": _lineup(), "home": []},
            "strategies": {"home-manager": "bunt"},
            "action_count": 2,
            "actions": [
                {
                    "id": 0,
                    "play": "KL",
                    "modifier": "",
                    "outs": 1,
                    "balls": 0,
                    "strikes": 3,
                    "runs": 0,
                    "rbis": 0,
                    "results": [
                        {
                            "id": 1,
                            "play": "PB",
                            "modifier": "",
                            "outs": 0,
                            "balls": 0,
                            "strikes": 0,
                            "runs": 1,
                            "rbis": 2,
                            "results": [],
                        }
                    ],
                }
            ],
        }
        out = render_result(ServiceResult(ok=True, op="get_game", data=data))
        assert "Opener" in out
        assert "home-manager: bunt" in out
        assert "[0] KL" in out
        assert "[1] PB" in out
        assert "runs=1 rbi=2" in out

    def test_fields_have_single_space(self) -> None:
        result = ServiceResult(
            ok=True, op="game_status", data={"id": 3, "status": "ready", "action_count": 0}
        )
        out = render_result(result)
        assert "  status: ready" in out
        assert "  id: 3" in out
        assert "status:  ready" not in out

    def test_action_tree_prefers_record_id(self) -> None:
        node = {
            "id": 0,
            "record_id": 17,
            "play": "KL",
            "modifier": "",
            "outs": 1,
            "balls": 0,
            "strikes": 3,
            "results": [],
        }
        data = {
            "id": 1,
            "name": "Opener",
            "visiting_team": {"id": 1, "name": "Philadelphia Phillies"},
            "home_team": {"id": 2, "name": "Colorado Rockies"},
            "status": "in_progress",
            "actions": [node],
        }
        out = render_result(ServiceResult(ok=True, op="get_game", data=data))
        assert "[17] KL" in out

    def test_empty_lineups(self) -> None:
        data = {"id": 1, "visiting": [], "home": []}
        result = ServiceResult(ok=True, op="list_lineups", data=data)
        out = render_result(result)
        assert "visiting: (empty)" in out
        assert "home: (empty)" in out

    def test_item_table(self) -> None:
        items = [{"id": 1, "name": "Colorado Rockies", "players": 9}]
        result = ServiceResult(ok=True, op="list_teams", data={"items": items, "count": 1})
        out = render_result(result)
        assert "Colorado Rockies" in out
        assert "1 items" in out

    def test_verbose_meta(self) -> None:
        meta = {"telemetry": {"name": "GameService.get_status", "duration_ms": 1.5}}
        result = ServiceResult(ok=True, op="game_status", data={"id": 1}, meta=meta)
        out = render_result(result, verbose=True)
        assert "GameService.get_status" in out
