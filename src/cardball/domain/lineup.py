"""Participant assembly — raw lineup submissions to validated Participants.

A submission is a list of ``(batting_order, fielding_position, player_id)``
entries. Batting order runs 0-8 with 0 batting first; fielding position
runs 0-8 and is the scorecard number minus one (0 = pitcher, 8 = right
field). Partial lineups are accepted; a full lineup has all nine slots.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from cardball.domain.errors import NotFoundError, ValidationError
from cardball.domain.roster import Player, RosterResolver
from cardball.domain.types import Side

LINEUP_SIZE = 9
SLOT_RANGE = range(LINEUP_SIZE)

FIELDING_POSITIONS: tuple[str, ...] = (
    "P",
    "C",
    "1B",
    "2B",
    "3B",
    "SS",
    "LF",
    "CF",
    "RF",
)


class ParticipantDefinition(BaseModel):
    """One entry of a lineup submission."""

    model_config = {"frozen": True, "populate_by_name": True}

    batting_order: int = Field(alias="numberInBattingOrder")
    fielding_position: int = Field(alias="fieldingPosition")
    player_id: int = Field(alias="playerId")


class LineupDefinition(BaseModel):
    """A lineup submission for one side."""

    participants: list[ParticipantDefinition] = Field(default_factory=list)


class Participant(BaseModel):
    """A player's slot assignment within one side of one game."""

    model_config = {"frozen": True}

    side: Side
    batting_order: int
    fielding_position: int
    player: Player

    @property
    def position_label(self) -> str:
        return FIELDING_POSITIONS[self.fielding_position]

    def to_dict(self) -> dict[str, Any]:
        return {
            "batting_order": self.batting_order,
            "fielding_position": self.fielding_position,
            "position": self.position_label,
            "player_id": self.player.id,
            "player": self.player.display_name,
        }


ParticipantInput = ParticipantDefinition | tuple[int, int, int]


def _coerce(entry: ParticipantInput) -> ParticipantDefinition:
    if isinstance(entry, ParticipantDefinition):
        return entry
    try:
        batting_order, fielding_position, player_id = entry
        return ParticipantDefinition(
            batting_order=batting_order,
            fielding_position=fielding_position,
            player_id=player_id,
        )
    except (PydanticValidationError, ValueError, TypeError) as exc:
        raise ValidationError(f"Malformed lineup entry {entry!r}", entry=repr(entry)) from exc


def check_lineup(entries: Sequence[tuple[int, int]]) -> None:
    """Validate ``(batting_order, fielding_position)`` pairs for one side.

    Raises:
        ValidationError: Too many entries, a value outside 0-8, or a
            duplicated batting-order slot or fielding position.
    """
    if len(entries) > LINEUP_SIZE:
        msg = f"A lineup holds at most {LINEUP_SIZE} participants, got {len(entries)}"
        raise ValidationError(msg, count=len(entries))

    seen_slots: set[int] = set()
    seen_positions: set[int] = set()
    for batting_order, fielding_position in entries:
        if batting_order not in SLOT_RANGE:
            msg = f"Batting order {batting_order} is outside 0-{LINEUP_SIZE - 1}"
            raise ValidationError(msg, batting_order=batting_order)
        if fielding_position not in SLOT_RANGE:
            msg = f"Fielding position {fielding_position} is outside 0-{LINEUP_SIZE - 1}"
            raise ValidationError(msg, fielding_position=fielding_position)
        if batting_order in seen_slots:
            msg = f"Batting order {batting_order} is assigned more than once"
            raise ValidationError(msg, batting_order=batting_order)
        if fielding_position in seen_positions:
            msg = f"Fielding position {fielding_position} is assigned more than once"
            raise ValidationError(msg, fielding_position=fielding_position)
        seen_slots.add(batting_order)
        seen_positions.add(fielding_position)


def assemble(
    side: Side | str,
    entries: Iterable[ParticipantInput],
    roster: RosterResolver,
) -> list[Participant]:
    """Build an ordered lineup for *side* from a raw submission.

    Validation runs completely before anything is returned, so a caller
    that installs the result never sees a half-built lineup.

    Returns:
        Participants sorted by batting order.

    Raises:
        InvalidEnumError: *side* is not a known side.
        ValidationError: Range, duplicate, or unresolved-player failures.
    """
    parsed_side = Side.parse(side)
    definitions = [_coerce(e) for e in entries]
    check_lineup([(d.batting_order, d.fielding_position) for d in definitions])

    player_ids = [d.player_id for d in definitions]
    duplicates = sorted({pid for pid in player_ids if player_ids.count(pid) > 1})
    if duplicates:
        msg = f"Player {duplicates[0]} appears more than once in the lineup"
        raise ValidationError(msg, player_id=duplicates[0])

    participants: list[Participant] = []
    for definition in definitions:
        try:
            player = roster.find_player(definition.player_id)
        except NotFoundError as exc:
            msg = f"Player {definition.player_id} does not exist"
            raise ValidationError(msg, player_id=definition.player_id) from exc
        participants.append(
            Participant(
                side=parsed_side,
                batting_order=definition.batting_order,
                fielding_position=definition.fielding_position,
                player=player,
            )
        )
    participants.sort(key=lambda p: p.batting_order)
    return participants


def is_complete(lineup: Sequence[Participant]) -> bool:
    """True when all nine batting-order slots are occupied."""
    return {p.batting_order for p in lineup} == set(SLOT_RANGE)
