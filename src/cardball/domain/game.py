"""Game aggregate — lineups, the action chain, and strategy for one game.

The aggregate enforces the cross-cutting invariants (distinct teams,
lineup shape, append-only actions) and derives :class:`GameStatus` on
read. It assumes exclusive access; callers serialize concurrent
mutations of the same game through the repository.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from cardball.domain.actions import Action, ActionChain, ActionData, ActionSubmission
from cardball.domain.errors import InvalidArgumentError
from cardball.domain.lifecycle import (
    GAME_TRANSITIONS,
    GameStatus,
    derive_status,
    is_valid_transition,
)
from cardball.domain.lineup import Participant, ParticipantInput, assemble, check_lineup, is_complete
from cardball.domain.roster import RosterResolver, Team
from cardball.domain.strategy import StrategyRegister
from cardball.domain.types import Role, Side

CompletionOracle = Callable[["Game"], bool]


class Game:
    """Aggregate root for a single game."""

    def __init__(
        self,
        name: str,
        visiting_team: Team,
        home_team: Team,
        *,
        id: int | None = None,  # noqa: A002
        actions: ActionChain | None = None,
        strategies: StrategyRegister | None = None,
        completed: bool = False,
        version: int = 0,
    ) -> None:
        if not name or not name.strip():
            raise InvalidArgumentError("Game name cannot be empty")
        if visiting_team is None or home_team is None:
            raise InvalidArgumentError("A game needs both a visiting and a home team")
        if (
            visiting_team is home_team
            or visiting_team == home_team
            or (visiting_team.id is not None and visiting_team.id == home_team.id)
        ):
            msg = f"Visiting and home team must differ (team {visiting_team.id})"
            raise InvalidArgumentError(msg, team_id=visiting_team.id)

        self.id = id
        self.name = name
        self._visiting_team = visiting_team
        self._home_team = home_team
        self._lineups: dict[Side, list[Participant]] = {Side.VISITING: [], Side.HOME: []}
        self.actions = actions if actions is not None else ActionChain()
        self.strategies = strategies if strategies is not None else StrategyRegister()
        self.completed = completed
        self.version = version

    @classmethod
    def create(cls, name: str, visiting_team: Team, home_team: Team) -> Game:
        """New game with empty lineups, no actions, and no strategy."""
        return cls(name, visiting_team, home_team)

    # ------------------------------------------------------------------
    # Teams and lineups
    # ------------------------------------------------------------------

    @property
    def visiting_team(self) -> Team:
        return self._visiting_team

    @property
    def home_team(self) -> Team:
        return self._home_team

    def team(self, side: Side | str) -> Team:
        return self._home_team if Side.parse(side) is Side.HOME else self._visiting_team

    @property
    def visiting_lineup(self) -> list[Participant]:
        return list(self._lineups[Side.VISITING])

    @property
    def home_lineup(self) -> list[Participant]:
        return list(self._lineups[Side.HOME])

    def lineup(self, side: Side | str) -> list[Participant]:
        return list(self._lineups[Side.parse(side)])

    def list_lineups(self) -> dict[Side, list[Participant]]:
        return {side: list(lineup) for side, lineup in self._lineups.items()}

    def put_lineup(
        self,
        side: Side | str,
        entries: Iterable[ParticipantInput],
        roster: RosterResolver,
    ) -> list[Participant]:
        """Assemble *entries* and replace the side's lineup wholesale.

        Validation completes before the swap, so on any error the previous
        lineup is left as it was.
        """
        parsed = Side.parse(side)
        participants = assemble(parsed, entries, roster)
        self.install_lineup(parsed, participants)
        return self.lineup(parsed)

    def install_lineup(self, side: Side | str, participants: Iterable[Participant]) -> None:
        """Replace a side's lineup with already-built participants."""
        parsed = Side.parse(side)
        lineup = sorted(participants, key=lambda p: p.batting_order)
        check_lineup([(p.batting_order, p.fielding_position) for p in lineup])
        for participant in lineup:
            if participant.side is not parsed:
                msg = f"Participant built for {participant.side} cannot join the {parsed} lineup"
                raise InvalidArgumentError(msg, side=str(parsed))
        self._lineups[parsed] = lineup

    def lineups_complete(self) -> bool:
        return all(is_complete(lineup) for lineup in self._lineups.values())

    # ------------------------------------------------------------------
    # Strategy
    # ------------------------------------------------------------------

    def post_strategy(
        self,
        role: Role | str,
        strategy: str,
        *,
        oracle: CompletionOracle | None = None,
    ) -> GameStatus:
        """Replace the strategy for *role* and return the re-derived status."""
        self.strategies.post(role, strategy)
        return self.status(oracle=oracle)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def record_action(
        self,
        data: ActionData,
        parent: Action | int | None = None,
        *,
        oracle: CompletionOracle | None = None,
    ) -> Action:
        """Append a play to the chain, with any nested results it carries.

        Raises:
            InvalidArgumentError: The game is completed, either by the
                explicit signal or because *oracle* says so.
            ReferentialError: *parent* is not an action of this game.
        """
        if self.status(oracle=oracle) is GameStatus.COMPLETED:
            raise InvalidArgumentError(f"Game {self.id} is completed; no more actions")
        if isinstance(data, ActionSubmission):
            return self.actions.append_tree(parent, data)
        return self.actions.append(parent, data)

    def add_action(self, data: ActionData, parent: Action | int | None = None) -> Game:
        """Chaining form of :meth:`record_action`."""
        self.record_action(data, parent)
        return self

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self, *, oracle: CompletionOracle | None = None) -> GameStatus:
        """Derive the current status. *oracle* may declare the game finished."""
        completed = self.completed
        if not completed and oracle is not None and self.actions:
            completed = bool(oracle(self))
        return derive_status(
            lineups_complete=self.lineups_complete(),
            has_actions=bool(self.actions),
            completed=completed,
        )

    def mark_completed(self) -> GameStatus:
        """Apply the external completion signal.

        Raises:
            InvalidArgumentError: The game cannot complete from its
                current status (still forming, or already completed).
        """
        current = self.status()
        if not is_valid_transition(current, GameStatus.COMPLETED, GAME_TRANSITIONS):
            msg = f"Game {self.id} cannot be completed while {current}"
            raise InvalidArgumentError(msg, status=str(current))
        self.completed = True
        return GameStatus.COMPLETED

    def to_dict(self, *, oracle: CompletionOracle | None = None) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "visiting_team": _team_summary(self._visiting_team),
            "home_team": _team_summary(self._home_team),
            "status": str(self.status(oracle=oracle)),
            "lineups": {
                str(side): [p.to_dict() for p in lineup]
                for side, lineup in self._lineups.items()
            },
            "strategies": self.strategies.as_dict(),
            "action_count": len(self.actions),
            "actions": self.actions.to_tree(),
            "completed": self.completed,
        }

    def __repr__(self) -> str:
        return f"Game(id={self.id!r}, name={self.name!r}, status={self.status()!s})"


def _team_summary(team: Team) -> dict[str, Any]:
    return {"id": team.id, "name": team.display_name}

