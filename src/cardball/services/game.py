"""GameService — create games and drive them through their lifecycle.

Every mutating operation follows the same pipeline:
LOAD → MUTATE (domain) → PERSIST (optimistic update) → EVENT → RESPOND

The domain aggregate does the validation; this layer owns the
transaction, turns domain errors into ServiceResult failures, and fires
plugin notifications once the write has succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from structlog.contextvars import bound_contextvars

from cardball.domain.actions import ActionData, ActionSubmission
from cardball.domain.errors import CardballError
from cardball.domain.game import Game
from cardball.domain.lineup import ParticipantInput
from cardball.domain.roster import Player, Team
from cardball.domain.types import Role, Side
from cardball.services.base import BaseService
from cardball.services.result import ServiceResult
from cardball.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _game_summary(game: Game, status: str) -> dict[str, Any]:
    return {
        "id": game.id,
        "name": game.name,
        "visiting_team": game.visiting_team.display_name,
        "home_team": game.home_team.display_name,
        "status": status,
        "action_count": len(game.actions),
    }


class GameService(BaseService):
    """Game creation, lineups, strategy, and the action log."""

    # ------------------------------------------------------------------
    # Creation and retrieval
    # ------------------------------------------------------------------

    @traced
    def create_game(self, name: str, visiting_team_id: int, home_team_id: int) -> ServiceResult:
        """Create a game between two existing teams."""
        warnings: list[str] = []
        try:
            with self._store.transaction() as txn:
                game = Game.create(
                    name,
                    txn.find_team(visiting_team_id),
                    txn.find_team(home_team_id),
                )
                txn.save(game)
        except CardballError as exc:
            return ServiceResult.failure("create_game", exc)

        logger.info("Created game %s: %s", game.id, game.name)
        self._dispatch_event(
            "post_create_game",
            {
                "game_id": game.id,
                "name": game.name,
                "visiting_team_id": visiting_team_id,
                "home_team_id": home_team_id,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="create_game",
            data=_game_summary(game, str(game.status())),
            warnings=warnings,
        )

    @traced
    def get_game(self, game_id: int) -> ServiceResult:
        """Full game state: teams, lineups, strategies, and the action tree."""
        try:
            with self._store.read() as txn:
                game = txn.get_game(game_id)
        except CardballError as exc:
            return ServiceResult.failure("get_game", exc)
        return ServiceResult(ok=True, op="get_game", data=game.to_dict(oracle=self._oracle()))

    @traced
    def list_games(self) -> ServiceResult:
        with self._store.read() as txn:
            all_games = txn.find_all()
        oracle = self._oracle()
        items = [_game_summary(g, str(g.status(oracle=oracle))) for g in all_games]
        return ServiceResult(ok=True, op="list_games", data={"items": items, "count": len(items)})

    @traced
    def get_status(self, game_id: int) -> ServiceResult:
        try:
            with self._store.read() as txn:
                game = txn.get_game(game_id)
        except CardballError as exc:
            return ServiceResult.failure("game_status", exc)
        return ServiceResult(
            ok=True,
            op="game_status",
            data={"id": game.id, "status": str(game.status(oracle=self._oracle()))},
        )

    # ------------------------------------------------------------------
    # Lineups
    # ------------------------------------------------------------------

    @traced
    def list_lineups(self, game_id: int) -> ServiceResult:
        """Both sides' lineups in batting order."""
        try:
            with self._store.read() as txn:
                game = txn.get_game(game_id)
        except CardballError as exc:
            return ServiceResult.failure("list_lineups", exc)
        data: dict[str, Any] = {"id": game.id}
        for side, lineup in game.list_lineups().items():
            data[str(side)] = [p.to_dict() for p in lineup]
        return ServiceResult(ok=True, op="list_lineups", data=data)

    @traced
    def put_lineup(
        self,
        game_id: int,
        side: Side | str,
        entries: Iterable[ParticipantInput],
    ) -> ServiceResult:
        """Replace one side's lineup. All-or-nothing: a bad entry changes nothing."""
        warnings: list[str] = []
        try:
            parsed = Side.parse(side)
            with bound_contextvars(game_id=game_id), self._store.transaction() as txn:
                with trace_span("load"):
                    game = txn.get_game(game_id)
                lineup = game.put_lineup(parsed, entries, txn)
                with trace_span("persist"):
                    txn.update(game)
                logger.info("Put %s lineup with %d participants", parsed, len(lineup))
        except CardballError as exc:
            return ServiceResult.failure("put_lineup", exc)

        self._dispatch_event(
            "post_put_lineup",
            {
                "game_id": game_id,
                "side": str(parsed),
                "player_ids": [p.player.id for p in lineup],
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="put_lineup",
            data={
                "id": game_id,
                "side": str(parsed),
                "lineup": [p.to_dict() for p in lineup],
                "status": str(game.status(oracle=self._oracle())),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Strategy
    # ------------------------------------------------------------------

    @traced
    def post_strategy(self, game_id: int, role: Role | str, strategy: str) -> ServiceResult:
        """Replace the strategy for a managerial role and report the new status."""
        warnings: list[str] = []
        try:
            parsed = Role.parse(role)
            with bound_contextvars(game_id=game_id), self._store.transaction() as txn:
                game = txn.get_game(game_id)
                status = game.post_strategy(parsed, strategy, oracle=self._oracle())
                txn.update(game)
                logger.info("Posted %s strategy; status %s", parsed, status)
        except CardballError as exc:
            return ServiceResult.failure("post_strategy", exc)

        self._dispatch_event(
            "post_strategy",
            {"game_id": game_id, "role": str(parsed), "strategy": strategy},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="post_strategy",
            data={"id": game_id, "role": str(parsed), "strategy": strategy, "status": str(status)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    @traced
    def record_action(
        self,
        game_id: int,
        action: ActionData,
        *,
        parent_id: int | None = None,
    ) -> ServiceResult:
        """Append an action, with any nested results, to a game's chain."""
        warnings: list[str] = []
        try:
            with bound_contextvars(game_id=game_id), self._store.transaction() as txn:
                with trace_span("load"):
                    game = txn.get_game(game_id)
                parent = game.actions.find_record(parent_id) if parent_id is not None else None
                head = game.record_action(action, parent, oracle=self._oracle())
                with trace_span("persist") as span:
                    txn.update(game)
                    if span is not None:
                        span.annotate("action_count", len(game.actions))
                logger.info(
                    "Recorded action %s (%s) parent=%s", head.record_id, head.play, parent_id
                )
        except CardballError as exc:
            return ServiceResult.failure("record_action", exc)

        added = len(game.actions) - head.id
        parent_ref = parent.record_id if parent is not None else None
        self._dispatch_event(
            "post_record_action",
            {
                "game_id": game_id,
                "action_id": head.record_id,
                "parent_id": parent_ref,
                "play": head.play,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="record_action",
            data={
                "id": game_id,
                "action_id": head.record_id,
                "parent_id": parent_ref,
                "play": head.play,
                "actions_added": added,
                "action_count": len(game.actions),
                "status": str(game.status(oracle=self._oracle())),
            },
            warnings=warnings,
        )

    @traced
    def complete_game(self, game_id: int) -> ServiceResult:
        """Apply the external completion signal to a game."""
        warnings: list[str] = []
        try:
            with bound_contextvars(game_id=game_id), self._store.transaction() as txn:
                game = txn.get_game(game_id)
                status = game.mark_completed()
                txn.update(game)
                logger.info("Game %s completed", game_id)
        except CardballError as exc:
            return ServiceResult.failure("complete_game", exc)

        self._dispatch_event("post_complete_game", {"game_id": game_id}, warnings)
        return ServiceResult(
            ok=True,
            op="complete_game",
            data={"id": game_id, "status": str(status)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Demo data
    # ------------------------------------------------------------------

    @traced
    def create_demo(self) -> ServiceResult:
        """Create two small teams and a game holding one strikeout/passed-ball chain."""
        demo = self._store.settings.demo
        visiting = Team(
            city=demo.visiting_city,
            nickname=demo.visiting_nickname,
            manager_first_name="Ed",
            manager_last_name="Gladstone",
            players=[
                Player(
                    first_name="Greg",
                    last_name="Luzinski",
                    year=1978,
                    position=7,
                    average=276,
                    contact_rating=999,
                    power_rating=9999,
                ),
                Player(
                    first_name="Larry",
                    last_name="Bowa",
                    year=1980,
                    position=6,
                    average=266,
                    contact_rating=999,
                    power_rating=9999,
                ),
            ],
        )
        home = Team(
            city=demo.home_city,
            nickname=demo.home_nickname,
            manager_first_name="Ned",
            manager_last_name="Gladstone",
            players=[
                Player(
                    first_name="Todd",
                    last_name="Helton",
                    year=2003,
                    position=3,
                    bats="R",
                    throws="R",
                    average=308,
                    contact_rating=999,
                    power_rating=9999,
                ),
                Player(
                    first_name="Larry",
                    last_name="Walker",
                    year=1998,
                    position=9,
                    bats="L",
                    throws="L",
                    average=297,
                    contact_rating=999,
                    power_rating=9999,
                ),
            ],
        )
        try:
            with self._store.transaction() as txn:
                visiting = txn.save_team(visiting)
                home = txn.save_team(home)
                game = Game.create(demo.game_name, visiting, home)
                strikeout = ActionSubmission(
                    outs=1,
                    batter_id=visiting.players[0].id,
                    play="KL",
                    ends_plate_appearance=True,
                    results=[
                        ActionSubmission(
                            batter_id=visiting.players[1].id,
                            runs=1,
                            rbis=2,
                            play="PB",
                            bases_advanced=2,
                        )
                    ],
                )
                game.record_action(strikeout)
                txn.save(game)
        except CardballError as exc:
            return ServiceResult.failure("create_demo", exc)

        logger.info("Created demo game %s", game.id)
        return ServiceResult(
            ok=True,
            op="create_demo",
            data=_game_summary(game, str(game.status())),
        )
