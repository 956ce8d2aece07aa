"""Tests for the action/result chain."""

import pytest

from cardball.domain.actions import ActionChain, ActionData, ActionSubmission
from cardball.domain.errors import NotFoundError, ReferentialError


def _play(play: str, **fields) -> ActionData:
    return ActionData(play=play, **fields)


class TestAppend:
    def test_root_actions(self) -> None:
        chain = ActionChain()
        a = chain.append(None, _play("1B"))
        b = chain.append(None, _play("K"))
        assert (a.id, b.id) == (0, 1)
        assert a.is_root and b.is_root
        assert [r.id for r in chain.roots()] == [0, 1]

    def test_result_action(self) -> None:
        chain = ActionChain()
        strikeout = chain.append(None, _play("KL", outs=1))
        passed_ball = chain.append(strikeout, _play("PB", runs=1))
        assert passed_ball.parent_id == strikeout.id
        assert strikeout.result_ids == [passed_ball.id]
        assert chain.results_of(strikeout.id) == [passed_ball]

    def test_parent_by_id(self) -> None:
        chain = ActionChain()
        chain.append(None, _play("BB"))
        child = chain.append(0, _play("SB"))
        assert child.parent_id == 0

    def test_unknown_parent_leaves_chain_unchanged(self) -> None:
        chain = ActionChain()
        chain.append(None, _play("1B"))
        with pytest.raises(ReferentialError):
            chain.append(5, _play("WP"))
        assert len(chain) == 1
        assert [a.play for a in chain.flatten()] == ["1B"]

    def test_parent_from_another_chain(self) -> None:
        ours = ActionChain()
        theirs = ActionChain()
        ours.append(None, _play("1B"))
        foreign = theirs.append(None, _play("HR"))
        assert foreign.id == 0  # same id exists in ours
        with pytest.raises(ReferentialError, match="different game"):
            ours.append(foreign, _play("PB"))
        assert len(ours) == 1
        assert ours.get(0).result_ids == []

    def test_data_is_kept_verbatim(self) -> None:
        chain = ActionChain()
        data = _play("2B", outs=2, balls=3, strikes=2, runs=1, rbis=1, scoring=True)
        action = chain.append(None, data)
        assert action.data is data


class TestAppendTree:
    def test_nested_results_depth_first(self) -> None:
        chain = ActionChain()
        submission = ActionSubmission(
            play="KL",
            results=[
                ActionSubmission(play="PB", results=[ActionSubmission(play="E2")]),
                ActionSubmission(play="SB"),
            ],
        )
        head = chain.append_tree(None, submission)
        assert head.id == 0
        assert [a.play for a in chain.flatten()] == ["KL", "PB", "E2", "SB"]
        assert [a.parent_id for a in chain.flatten()] == [None, 0, 1, 0]

    def test_bad_parent_appends_nothing(self) -> None:
        chain = ActionChain()
        submission = ActionSubmission(play="KL", results=[ActionSubmission(play="PB")])
        with pytest.raises(ReferentialError):
            chain.append_tree(3, submission)
        assert len(chain) == 0


class TestReads:
    def test_flatten_visits_results_before_next_root(self) -> None:
        chain = ActionChain()
        a = chain.append(None, _play("A"))
        chain.append(None, _play("C"))
        chain.append(a, _play("B"))
        assert [x.play for x in chain.flatten()] == ["A", "B", "C"]

    def test_flatten_is_restartable(self) -> None:
        chain = ActionChain()
        a = chain.append(None, _play("A"))
        chain.append(a, _play("B"))
        view = chain.flatten()
        assert [x.play for x in view] == ["A", "B"]
        assert [x.play for x in view] == ["A", "B"]
        assert len(view) == 2

    def test_empty_chain(self) -> None:
        chain = ActionChain()
        assert not chain
        assert list(chain.flatten()) == []
        assert chain.to_tree() == []

    def test_get_missing(self) -> None:
        with pytest.raises(NotFoundError):
            ActionChain().get(0)

    def test_find_record(self) -> None:
        chain = ActionChain()
        root = chain.append(None, _play("KL"))
        result = chain.append(root, _play("PB"))
        root.record_id, result.record_id = 41, 42
        assert chain.find_record(42) is result
        with pytest.raises(ReferentialError, match="not part of this game"):
            chain.find_record(0)  # chain index, not a record id

    def test_to_tree(self) -> None:
        chain = ActionChain()
        root = chain.append(None, _play("KL"))
        chain.append(root, _play("PB", bases_advanced=2))
        (node,) = chain.to_tree()
        assert node["id"] == 0
        assert node["play"] == "KL"
        assert node["results"][0]["play"] == "PB"
        assert node["results"][0]["bases_advanced"] == 2

    def test_action_to_dict(self) -> None:
        chain = ActionChain()
        root = chain.append(None, _play("KL", prior_state={"first": 12}))
        chain.append(root, _play("PB"))
        payload = root.to_dict()
        assert payload["result_ids"] == [1]
        assert payload["parent_id"] is None
        assert payload["prior_state"] == {"first": 12}
