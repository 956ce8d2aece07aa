"""SQLAlchemy Core table definitions for the cardball database.

Actions are stored flat: each row carries its chain-local ``action_id``
and the ``parent_id`` of the action that caused it, which is enough to
rebuild the forest in insertion order. The autoincrement ``id`` is the
store-wide reference callers use to name a parent action.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

teams = Table(
    "teams",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("city", Text, nullable=False),
    Column("nickname", Text, nullable=False),
    Column("manager_first_name", Text, default="", server_default=""),
    Column("manager_last_name", Text, default="", server_default=""),
    Column("created", Text, nullable=False),
)

players = Table(
    "players",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("team_id", Integer, ForeignKey("teams.id")),
    Column("first_name", Text, nullable=False),
    Column("last_name", Text, nullable=False),
    Column("year", Integer),
    Column("position", Integer),  # scorecard numbering
    Column("bats", Text, default="R", server_default="R"),
    Column("throws", Text, default="R", server_default="R"),
    Column("average", Integer, default=0, server_default="0"),
    Column("contact_rating", Integer, default=0, server_default="0"),
    Column("power_rating", Integer, default=0, server_default="0"),
)

games = Table(
    "games",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("visiting_team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("home_team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("chain_key", Text, nullable=False, unique=True),
    Column("completed", Integer, default=0, server_default="0"),
    Column("version", Integer, nullable=False, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

participants = Table(
    "participants",
    metadata,
    Column("game_id", Integer, ForeignKey("games.id"), nullable=False),
    Column("side", Text, nullable=False),  # visiting | home
    Column("batting_order", Integer, nullable=False),
    Column("fielding_position", Integer, nullable=False),
    Column("player_id", Integer, ForeignKey("players.id"), nullable=False),
    UniqueConstraint("game_id", "side", "batting_order"),
)

game_actions = Table(
    "game_actions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("game_id", Integer, ForeignKey("games.id"), nullable=False),
    Column("action_id", Integer, nullable=False),
    Column("parent_id", Integer),
    Column("prior_state", Text),  # JSON object
    Column("while_state", Text),  # JSON object
    Column("after_state", Text),  # JSON object
    Column("outs", Integer, default=0, server_default="0"),
    Column("balls", Integer, default=0, server_default="0"),
    Column("strikes", Integer, default=0, server_default="0"),
    Column("batter_id", Integer),
    Column("timestamp", Text, nullable=False),
    Column("runs", Integer, default=0, server_default="0"),
    Column("rbis", Integer, default=0, server_default="0"),
    Column("play", Text, nullable=False),
    Column("modifier", Text, default="", server_default=""),
    Column("bases_advanced", Integer, default=0, server_default="0"),
    Column("scoring", Integer, default=0, server_default="0"),
    Column("ends_plate_appearance", Integer, default=0, server_default="0"),
    UniqueConstraint("game_id", "action_id"),
)

strategies = Table(
    "strategies",
    metadata,
    Column("game_id", Integer, ForeignKey("games.id"), nullable=False),
    Column("role", Text, nullable=False),
    Column("strategy", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("game_id", "role"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_players_team", players.c.team_id)
Index("ix_participants_game", participants.c.game_id)
Index("ix_game_actions_game", game_actions.c.game_id)
Index("ix_strategies_game", strategies.c.game_id)
