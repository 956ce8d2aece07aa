"""Tests for lineup assembly and validation."""

import pytest

from cardball.domain.errors import InvalidEnumError, ValidationError
from cardball.domain.lineup import (
    FIELDING_POSITIONS,
    ParticipantDefinition,
    assemble,
    check_lineup,
    is_complete,
)
from cardball.domain.types import Side
from tests.conftest import InMemoryRoster, full_lineup, make_team


@pytest.fixture
def team():
    return make_team(1, "Hosts", first_player_id=100)


@pytest.fixture
def roster(team):
    return InMemoryRoster(team)


class TestParticipantDefinition:
    def test_accepts_wire_aliases(self) -> None:
        d = ParticipantDefinition.model_validate(
            {"numberInBattingOrder": 3, "fieldingPosition": 5, "playerId": 42}
        )
        assert (d.batting_order, d.fielding_position, d.player_id) == (3, 5, 42)

    def test_accepts_field_names(self) -> None:
        d = ParticipantDefinition(batting_order=0, fielding_position=1, player_id=7)
        assert d.player_id == 7


class TestCheckLineup:
    def test_full_lineup_passes(self) -> None:
        check_lineup([(i, 8 - i) for i in range(9)])

    def test_empty_lineup_passes(self) -> None:
        check_lineup([])

    def test_too_many_entries(self) -> None:
        with pytest.raises(ValidationError, match="at most 9"):
            check_lineup([(i % 9, i % 9) for i in range(10)])

    @pytest.mark.parametrize("pair", [(9, 0), (-1, 0), (0, 9), (0, -1)])
    def test_out_of_range(self, pair: tuple[int, int]) -> None:
        with pytest.raises(ValidationError):
            check_lineup([pair])

    def test_duplicate_slot(self) -> None:
        with pytest.raises(ValidationError, match="Batting order 2"):
            check_lineup([(2, 0), (2, 1)])

    def test_duplicate_position(self) -> None:
        with pytest.raises(ValidationError, match="Fielding position 4"):
            check_lineup([(0, 4), (1, 4)])


class TestAssemble:
    def test_sorted_by_batting_order(self, team, roster) -> None:
        entries = [(8 - i, i, p.id) for i, p in enumerate(team.players)]
        lineup = assemble(Side.HOME, entries, roster)
        assert [p.batting_order for p in lineup] == list(range(9))
        assert lineup[0].player.id == team.players[8].id
        assert all(p.side is Side.HOME for p in lineup)

    def test_partial_lineup(self, team, roster) -> None:
        lineup = assemble("home", [(4, 2, team.players[0].id)], roster)
        assert len(lineup) == 1
        assert lineup[0].position_label == "1B"
        assert not is_complete(lineup)

    def test_full_lineup_is_complete(self, team, roster) -> None:
        lineup = assemble(Side.HOME, full_lineup(team), roster)
        assert is_complete(lineup)
        assert [p.position_label for p in lineup] == list(FIELDING_POSITIONS)

    def test_unknown_player(self, roster) -> None:
        with pytest.raises(ValidationError) as exc_info:
            assemble(Side.HOME, [(0, 0, 9999)], roster)
        assert exc_info.value.detail["player_id"] == 9999

    @pytest.mark.parametrize("entry", [("x", 0, 100), (0, 0), (0, 0, 100, 1), None])
    def test_malformed_entry(self, roster, entry) -> None:
        with pytest.raises(ValidationError, match="Malformed lineup entry"):
            assemble(Side.HOME, [entry], roster)

    def test_duplicate_player(self, team, roster) -> None:
        pid = team.players[0].id
        with pytest.raises(ValidationError, match="more than once"):
            assemble(Side.HOME, [(0, 0, pid), (1, 1, pid)], roster)

    def test_unknown_side(self, team, roster) -> None:
        with pytest.raises(InvalidEnumError):
            assemble("bullpen", full_lineup(team), roster)

    def test_to_dict(self, team, roster) -> None:
        (participant,) = assemble(Side.HOME, [(0, 1, team.players[2].id)], roster)
        data = participant.to_dict()
        assert data == {
            "batting_order": 0,
            "fielding_position": 1,
            "position": "C",
            "player_id": team.players[2].id,
            "player": team.players[2].display_name,
        }
