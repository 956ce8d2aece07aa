"""Store — repository for games and rosters over SQLite.

The Store is the single dependency injected into every service. It owns
the database engine and the plugin manager. :meth:`Store.transaction`
yields a :class:`StoreTransaction` bound to one connection; that object
is both the roster resolver and the game repository the domain expects.

Game updates use optimistic locking: ``games.version`` must still match
the version the game was loaded with, otherwise :class:`ConflictError`.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from cardball.domain.actions import ActionChain, ActionData
from cardball.domain.errors import ConflictError, NotFoundError
from cardball.domain.game import Game
from cardball.domain.lineup import Participant
from cardball.domain.roster import Player, Team
from cardball.domain.strategy import StrategyRegister
from cardball.domain.types import Side
from cardball.infrastructure.database.engine import init_database
from cardball.infrastructure.database.schema import (
    game_actions,
    games,
    participants,
    players,
    strategies,
    teams,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

    from cardball.config.settings import CardballSettings
    from cardball.domain.actions import Action
    from cardball.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _dump_state(state: dict[str, Any] | None) -> str | None:
    return json.dumps(state) if state is not None else None


def _load_state(raw: str | None) -> dict[str, Any] | None:
    return json.loads(raw) if raw else None


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def _player_from_row(row: Row[Any]) -> Player:
    return Player(
        id=row.id,
        team_id=row.team_id,
        first_name=row.first_name,
        last_name=row.last_name,
        year=row.year,
        position=row.position,
        bats=row.bats,
        throws=row.throws,
        average=row.average,
        contact_rating=row.contact_rating,
        power_rating=row.power_rating,
    )


def _action_values(game_id: int, action: Action) -> dict[str, Any]:
    data = action.data
    return {
        "game_id": game_id,
        "action_id": action.id,
        "parent_id": action.parent_id,
        "prior_state": _dump_state(data.prior_state),
        "while_state": _dump_state(data.while_state),
        "after_state": _dump_state(data.after_state),
        "outs": data.outs,
        "balls": data.balls,
        "strikes": data.strikes,
        "batter_id": data.batter_id,
        "timestamp": data.timestamp.isoformat(),
        "runs": data.runs,
        "rbis": data.rbis,
        "play": data.play,
        "modifier": data.modifier,
        "bases_advanced": data.bases_advanced,
        "scoring": int(data.scoring),
        "ends_plate_appearance": int(data.ends_plate_appearance),
    }


def _action_data_from_row(row: Row[Any]) -> ActionData:
    return ActionData(
        prior_state=_load_state(row.prior_state),
        while_state=_load_state(row.while_state),
        after_state=_load_state(row.after_state),
        outs=row.outs,
        balls=row.balls,
        strikes=row.strikes,
        batter_id=row.batter_id,
        timestamp=row.timestamp,
        runs=row.runs,
        rbis=row.rbis,
        play=row.play,
        modifier=row.modifier,
        bases_advanced=row.bases_advanced,
        scoring=bool(row.scoring),
        ends_plate_appearance=bool(row.ends_plate_appearance),
    )


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Data access bound to one connection.

    Implements :class:`~cardball.domain.roster.RosterResolver` and
    :class:`~cardball.domain.roster.GameRepository`.
    """

    conn: Connection

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def save_team(self, team: Team) -> Team:
        """Insert *team* (players included) and return it with identity."""
        result = self.conn.execute(
            insert(teams).values(
                city=team.city,
                nickname=team.nickname,
                manager_first_name=team.manager_first_name,
                manager_last_name=team.manager_last_name,
                created=_now(),
            )
        )
        team_id = int(result.inserted_primary_key[0])
        saved_players = [
            self.save_player(p.model_copy(update={"team_id": team_id})) for p in team.players
        ]
        return team.model_copy(update={"id": team_id, "players": saved_players})

    def save_player(self, player: Player) -> Player:
        if player.team_id is not None:
            self.find_team(player.team_id)
        values = player.model_dump(exclude={"id"})
        result = self.conn.execute(insert(players).values(**values))
        return player.model_copy(update={"id": int(result.inserted_primary_key[0])})

    def find_team(self, team_id: int) -> Team:
        row = self.conn.execute(select(teams).where(teams.c.id == team_id)).first()
        if row is None:
            raise NotFoundError(f"Team {team_id} does not exist", team_id=team_id)
        roster_rows = self.conn.execute(
            select(players).where(players.c.team_id == team_id).order_by(players.c.id)
        ).fetchall()
        return Team(
            id=row.id,
            city=row.city,
            nickname=row.nickname,
            manager_first_name=row.manager_first_name,
            manager_last_name=row.manager_last_name,
            players=[_player_from_row(r) for r in roster_rows],
        )

    def find_player(self, player_id: int) -> Player:
        row = self.conn.execute(select(players).where(players.c.id == player_id)).first()
        if row is None:
            raise NotFoundError(f"Player {player_id} does not exist", player_id=player_id)
        return _player_from_row(row)

    def find_all_teams(self) -> list[Team]:
        ids = self.conn.execute(select(teams.c.id).order_by(teams.c.id)).scalars().all()
        return [self.find_team(team_id) for team_id in ids]

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    def save(self, game: Game) -> Game:
        """Insert a new game and everything it already holds; assigns ``game.id``."""
        now = _now()
        result = self.conn.execute(
            insert(games).values(
                name=game.name,
                visiting_team_id=game.visiting_team.id,
                home_team_id=game.home_team.id,
                chain_key=game.actions.key,
                completed=int(game.completed),
                version=0,
                created=now,
                modified=now,
            )
        )
        game.id = int(result.inserted_primary_key[0])
        game.version = 0
        self._write_children(game, now=now, existing_actions=0)
        logger.debug("Saved game %s (%s)", game.id, game.name)
        return game

    def update(self, game: Game) -> None:
        """Persist *game*, bumping its version.

        Raises:
            NotFoundError: The game was never saved or no longer exists.
            ConflictError: Someone else updated the game since it was loaded.
        """
        if game.id is None:
            raise NotFoundError("Cannot update a game that was never saved")
        now = _now()
        result = self.conn.execute(
            update(games)
            .where(games.c.id == game.id, games.c.version == game.version)
            .values(completed=int(game.completed), version=game.version + 1, modified=now)
        )
        if result.rowcount == 0:
            exists = self.conn.execute(select(games.c.id).where(games.c.id == game.id)).first()
            if exists is None:
                raise NotFoundError(f"Game {game.id} does not exist", game_id=game.id)
            msg = f"Game {game.id} was modified concurrently (version {game.version})"
            raise ConflictError(msg, game_id=game.id, version=game.version)

        stored_actions = self.conn.execute(
            select(func.count()).select_from(game_actions).where(game_actions.c.game_id == game.id)
        ).scalar_one()
        self.conn.execute(delete(participants).where(participants.c.game_id == game.id))
        self.conn.execute(delete(strategies).where(strategies.c.game_id == game.id))
        self._write_children(game, now=now, existing_actions=stored_actions)
        game.version += 1

    def _write_children(self, game: Game, *, now: str, existing_actions: int) -> None:
        """Write lineups and strategies in full, and actions not yet stored.

        Actions are append-only, so anything at or past *existing_actions*
        in the arena is new.
        """
        assert game.id is not None
        for side, lineup in game.list_lineups().items():
            for p in lineup:
                self.conn.execute(
                    insert(participants).values(
                        game_id=game.id,
                        side=str(side),
                        batting_order=p.batting_order,
                        fielding_position=p.fielding_position,
                        player_id=p.player.id,
                    )
                )
        for role, text in game.strategies.as_dict().items():
            self.conn.execute(
                insert(strategies).values(game_id=game.id, role=role, strategy=text, modified=now)
            )
        new_actions = [a for a in game.actions.flatten() if a.id >= existing_actions]
        for action in sorted(new_actions, key=lambda a: a.id):
            result = self.conn.execute(
                insert(game_actions).values(**_action_values(game.id, action))
            )
            action.record_id = int(result.inserted_primary_key[0])

    def find_by_id(self, game_id: int) -> Game | None:
        row = self.conn.execute(select(games).where(games.c.id == game_id)).first()
        if row is None:
            return None
        return self._load_game(row)

    def get_game(self, game_id: int) -> Game:
        """Like :meth:`find_by_id` but raises ``NotFoundError`` on a miss."""
        game = self.find_by_id(game_id)
        if game is None:
            raise NotFoundError(f"Game {game_id} does not exist", game_id=game_id)
        return game

    def find_all(self) -> list[Game]:
        rows = self.conn.execute(select(games).order_by(games.c.id)).fetchall()
        return [self._load_game(r) for r in rows]

    def _load_game(self, row: Row[Any]) -> Game:
        chain = ActionChain(key=row.chain_key)
        action_rows = self.conn.execute(
            select(game_actions)
            .where(game_actions.c.game_id == row.id)
            .order_by(game_actions.c.action_id)
        ).fetchall()
        for action_row in action_rows:
            action = chain.append(action_row.parent_id, _action_data_from_row(action_row))
            action.record_id = action_row.id

        strategy_rows = self.conn.execute(
            select(strategies.c.role, strategies.c.strategy).where(strategies.c.game_id == row.id)
        ).fetchall()
        register = StrategyRegister({r.role: r.strategy for r in strategy_rows})

        game = Game(
            row.name,
            self.find_team(row.visiting_team_id),
            self.find_team(row.home_team_id),
            id=row.id,
            actions=chain,
            strategies=register,
            completed=bool(row.completed),
            version=row.version,
        )

        lineup_rows = self.conn.execute(
            select(participants).where(participants.c.game_id == row.id)
        ).fetchall()
        by_side: dict[Side, list[Participant]] = {Side.VISITING: [], Side.HOME: []}
        for lr in lineup_rows:
            side = Side.parse(lr.side)
            by_side[side].append(
                Participant(
                    side=side,
                    batting_order=lr.batting_order,
                    fielding_position=lr.fielding_position,
                    player=self.find_player(lr.player_id),
                )
            )
        for side, lineup in by_side.items():
            game.install_lineup(side, lineup)
        return game


# ---------------------------------------------------------------------------
# Store — the repository
# ---------------------------------------------------------------------------


class Store:
    """Repository encapsulating database access and plugin wiring.

    Constructed once at CLI startup from :class:`CardballSettings` and
    stored in ``click.Context.obj``. Services receive the Store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: CardballSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.db_path, echo=settings.database.echo)
        self._plugins: PluginManager | None = None

    @property
    def root(self) -> Path:
        """The project root directory."""
        return self._settings.project_root

    @property
    def db_path(self) -> Path:
        path = Path(self._settings.database.path)
        return path if path.is_absolute() else self.root / path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> CardballSettings:
        return self._settings

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugins

    def init_plugins(self) -> None:
        """Create the plugin manager and load entry-point plugins if enabled."""
        from cardball.plugins.manager import PluginManager

        pm = PluginManager()
        if self._settings.plugins.enabled:
            pm.discover_and_load()
        self._plugins = pm

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Run a block in one database transaction.

        Commits when the block exits normally and rolls back on any
        exception, so a failed operation leaves no partial writes.

        Usage::

            with store.transaction() as txn:
                game = txn.get_game(game_id)
                game.put_lineup("home", entries, txn)
                txn.update(game)
        """
        with self._engine.begin() as conn:
            yield StoreTransaction(conn=conn)

    @contextmanager
    def read(self) -> Iterator[StoreTransaction]:
        """Read-only access without transaction overhead."""
        with self._engine.connect() as conn:
            yield StoreTransaction(conn=conn)

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
