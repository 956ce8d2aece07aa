"""Roster records and the collaborator contracts the game core consumes.

Teams and players are plain attribute records. The core never looks them
up itself; it receives a :class:`RosterResolver` and a
:class:`GameRepository` from whoever drives it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from cardball.domain.game import Game


class Player(BaseModel):
    """A player card."""

    model_config = {"frozen": True}

    id: int | None = None
    team_id: int | None = None
    first_name: str
    last_name: str
    year: int | None = None
    position: int | None = None  # scorecard numbering, 1-9
    bats: str = "R"
    throws: str = "R"
    average: int = 0  # batting average x 1000
    contact_rating: int = 0
    power_rating: int = 0

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Team(BaseModel):
    """A team and the player cards on its roster."""

    model_config = {"frozen": True}

    id: int | None = None
    city: str
    nickname: str
    manager_first_name: str = ""
    manager_last_name: str = ""
    players: list[Player] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return f"{self.city} {self.nickname}"


class RosterResolver(Protocol):
    """Team/player lookup. Both methods raise ``NotFoundError`` on a miss."""

    def find_team(self, team_id: int) -> Team: ...

    def find_player(self, player_id: int) -> Player: ...


class GameRepository(Protocol):
    """Persistence contract for the game aggregate."""

    def save(self, game: Game) -> Game: ...

    def find_by_id(self, game_id: int) -> Game | None: ...

    def update(self, game: Game) -> None: ...

    def find_all(self) -> list[Game]: ...
