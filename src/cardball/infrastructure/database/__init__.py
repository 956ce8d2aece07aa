"""SQLite database engine and schema via SQLAlchemy Core."""

from cardball.infrastructure.database.engine import create_db_engine, init_database
from cardball.infrastructure.database.schema import (
    game_actions,
    games,
    metadata,
    participants,
    players,
    strategies,
    teams,
)

__all__ = [
    "create_db_engine",
    "game_actions",
    "games",
    "init_database",
    "metadata",
    "participants",
    "players",
    "strategies",
    "teams",
]
