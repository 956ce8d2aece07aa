"""TeamService — the roster records games are built from."""

from __future__ import annotations

import logging
from typing import Any

from cardball.domain.errors import CardballError, InvalidArgumentError
from cardball.domain.roster import Player, Team
from cardball.services.base import BaseService
from cardball.services.result import ServiceResult
from cardball.services.telemetry import traced

logger = logging.getLogger(__name__)

_HANDS = frozenset({"R", "L", "S"})


def _team_data(team: Team) -> dict[str, Any]:
    return {
        "id": team.id,
        "name": team.display_name,
        "city": team.city,
        "nickname": team.nickname,
        "manager": f"{team.manager_first_name} {team.manager_last_name}".strip(),
        "players": [_player_data(p) for p in team.players],
    }


def _player_data(player: Player) -> dict[str, Any]:
    return {
        "id": player.id,
        "name": player.display_name,
        "year": player.year,
        "position": player.position,
        "bats": player.bats,
        "throws": player.throws,
        "average": player.average,
    }


class TeamService(BaseService):
    """Create and look up teams and players."""

    @traced
    def create_team(
        self,
        city: str,
        nickname: str,
        *,
        manager_first_name: str = "",
        manager_last_name: str = "",
    ) -> ServiceResult:
        if not city.strip() or not nickname.strip():
            return ServiceResult.failure(
                "create_team", InvalidArgumentError("Team city and nickname are required")
            )
        team = Team(
            city=city,
            nickname=nickname,
            manager_first_name=manager_first_name,
            manager_last_name=manager_last_name,
        )
        with self._store.transaction() as txn:
            team = txn.save_team(team)
        logger.info("Created team %s: %s", team.id, team.display_name)
        return ServiceResult(ok=True, op="create_team", data=_team_data(team))

    @traced
    def add_player(
        self,
        team_id: int,
        first_name: str,
        last_name: str,
        **attributes: Any,
    ) -> ServiceResult:
        """Add a player card to a team's roster."""
        for hand in ("bats", "throws"):
            value = attributes.get(hand)
            if value is not None and value not in _HANDS:
                msg = f"{hand} must be one of {', '.join(sorted(_HANDS))}, got {value!r}"
                return ServiceResult.failure("add_player", InvalidArgumentError(msg))
        position = attributes.get("position")
        if position is not None and not 1 <= position <= 9:
            msg = f"Scorecard position must be 1-9, got {position}"
            return ServiceResult.failure("add_player", InvalidArgumentError(msg))

        values = {k: v for k, v in attributes.items() if v is not None}
        player = Player(team_id=team_id, first_name=first_name, last_name=last_name, **values)
        try:
            with self._store.transaction() as txn:
                player = txn.save_player(player)
        except CardballError as exc:
            return ServiceResult.failure("add_player", exc)
        return ServiceResult(
            ok=True,
            op="add_player",
            data={"team_id": team_id, **_player_data(player)},
        )

    @traced
    def get_team(self, team_id: int) -> ServiceResult:
        try:
            with self._store.read() as txn:
                team = txn.find_team(team_id)
        except CardballError as exc:
            return ServiceResult.failure("get_team", exc)
        return ServiceResult(ok=True, op="get_team", data=_team_data(team))

    @traced
    def list_teams(self) -> ServiceResult:
        with self._store.read() as txn:
            all_teams = txn.find_all_teams()
        items = [
            {"id": t.id, "name": t.display_name, "players": len(t.players)} for t in all_teams
        ]
        return ServiceResult(ok=True, op="list_teams", data={"items": items, "count": len(items)})
