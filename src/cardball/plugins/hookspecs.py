"""Pluggy hook specifications for cardball.

One query hook lets a plugin act as the completion oracle: the core
never decides from recorded actions when a game is over. The remaining
hooks are notifications fired after a game mutation has been committed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from cardball.domain.game import Game

PROJECT_NAME = "cardball"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CardballHookSpec:
    """Hook specifications for the cardball plugin system."""

    @hookspec(firstresult=True)
    def is_game_complete(self, game: Game) -> bool | None:
        """Return True/False to decide completion, or None to abstain."""

    @hookspec
    def post_create_game(
        self,
        game_id: int,
        name: str,
        visiting_team_id: int,
        home_team_id: int,
    ) -> None:
        """Called after a game is created."""

    @hookspec
    def post_put_lineup(self, game_id: int, side: str, player_ids: list[int]) -> None:
        """Called after a side's lineup is replaced."""

    @hookspec
    def post_record_action(
        self,
        game_id: int,
        action_id: int,
        parent_id: int | None,
        play: str,
    ) -> None:
        """Called after an action (and its nested results) is recorded."""

    @hookspec
    def post_strategy(self, game_id: int, role: str, strategy: str) -> None:
        """Called after a strategy is posted."""

    @hookspec
    def post_complete_game(self, game_id: int) -> None:
        """Called after a game receives the completion signal."""
