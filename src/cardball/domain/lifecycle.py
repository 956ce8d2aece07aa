"""Game status lifecycle.

Status is always computed from the game's structural properties and is
never stored. The transition map documents which derived changes are
legal; :func:`derive_status` is the single source of truth.
"""

from __future__ import annotations

from enum import StrEnum


class GameStatus(StrEnum):
    """Derived lifecycle stage of a game."""

    FORMING = "forming"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# A lineup replacement can make a side incomplete again, so FORMING is
# reachable from READY and IN_PROGRESS.
GAME_TRANSITIONS: dict[str, list[str]] = {
    "forming": ["ready"],
    "ready": ["forming", "in_progress", "completed"],
    "in_progress": ["forming", "completed"],
    "completed": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def derive_status(
    *,
    lineups_complete: bool,
    has_actions: bool,
    completed: bool,
) -> GameStatus:
    """Compute the game status from its structural properties.

    Completion is terminal and wins over everything else; it is decided
    by an external signal, never by inspecting recorded actions.
    """
    if completed:
        return GameStatus.COMPLETED
    if not lineups_complete:
        return GameStatus.FORMING
    if not has_actions:
        return GameStatus.READY
    return GameStatus.IN_PROGRESS
