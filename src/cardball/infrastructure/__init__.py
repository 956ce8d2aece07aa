"""Infrastructure layer — SQLite persistence for games and rosters.

This layer depends on stdlib and third-party libs (SQLAlchemy).
The store maps domain aggregates to tables and back; it holds no game
rules of its own.
"""
