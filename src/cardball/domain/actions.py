"""Action/result chain — the append-only play log of a game.

Each recorded play is an :class:`Action`. An action may own result
actions: later events it caused, such as a passed ball on a strikeout
that lets the batter reach base. The log is therefore a forest.

The forest is stored as an arena. Every action receives a chain-local
integer id equal to its position in the arena, and each action keeps the
ids of its results rather than the result objects themselves. Ids are
never reused and actions are never removed or reordered.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from cardball.domain.errors import NotFoundError, ReferentialError


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ActionData(BaseModel):
    """Captured facts of one play. Trusted as given; nothing is recomputed.

    ``prior_state``, ``while_state`` and ``after_state`` are opaque
    snapshots of the surrounding game situation (base runners and the
    like). Their structure belongs to whoever produces them.
    """

    model_config = {"frozen": True}

    prior_state: dict[str, Any] | None = None
    while_state: dict[str, Any] | None = None
    after_state: dict[str, Any] | None = None
    outs: int = 0
    balls: int = 0
    strikes: int = 0
    batter_id: int | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
    runs: int = 0
    rbis: int = 0
    play: str
    modifier: str = ""
    bases_advanced: int = 0
    scoring: bool = False
    ends_plate_appearance: bool = False


class ActionSubmission(ActionData):
    """An action together with the result actions submitted alongside it."""

    results: list[ActionSubmission] = Field(default_factory=list)

    def data(self) -> ActionData:
        return ActionData.model_validate(self.model_dump(exclude={"results"}))


ActionSubmission.model_rebuild()


@dataclass
class Action:
    """One node of the action forest."""

    id: int
    chain_key: str
    data: ActionData
    parent_id: int | None = None
    result_ids: list[int] = field(default_factory=list)
    record_id: int | None = None  # store-wide id, set once persisted

    @property
    def play(self) -> str:
        return self.data.play

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_dict(self) -> dict[str, Any]:
        payload = self.data.model_dump(mode="json")
        payload["id"] = self.id
        payload["record_id"] = self.record_id
        payload["parent_id"] = self.parent_id
        payload["result_ids"] = list(self.result_ids)
        return payload


class _Flattened:
    """Restartable depth-first view over a chain. Each iteration starts fresh."""

    def __init__(self, chain: ActionChain) -> None:
        self._chain = chain

    def __iter__(self) -> Iterator[Action]:
        stack = list(reversed(self._chain.root_ids))
        while stack:
            action = self._chain.get(stack.pop())
            yield action
            stack.extend(reversed(action.result_ids))

    def __len__(self) -> int:
        return len(self._chain)


class ActionChain:
    """Arena-backed forest of actions belonging to one game.

    ``key`` identifies the chain; an :class:`Action` carries the key of
    the chain that created it, so an action object from another game is
    rejected as a parent even when its id happens to exist here.
    """

    def __init__(self, key: str | None = None) -> None:
        self.key = key or uuid.uuid4().hex
        self._arena: list[Action] = []
        self.root_ids: list[int] = []

    def __len__(self) -> int:
        return len(self._arena)

    def __bool__(self) -> bool:
        return bool(self._arena)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append(self, parent: Action | int | None, data: ActionData) -> Action:
        """Append *data* as a new root (``parent=None``) or as a result of *parent*.

        Raises:
            ReferentialError: *parent* is not an action of this chain. The
                chain is unchanged.
        """
        parent_action = self._resolve_parent(parent)
        action = Action(
            id=len(self._arena),
            chain_key=self.key,
            data=data,
            parent_id=parent_action.id if parent_action is not None else None,
        )
        self._arena.append(action)
        if parent_action is None:
            self.root_ids.append(action.id)
        else:
            parent_action.result_ids.append(action.id)
        return action

    def append_tree(self, parent: Action | int | None, submission: ActionSubmission) -> Action:
        """Append *submission* and its nested results, depth-first in submission order."""
        # Resolve before writing anything so a bad parent leaves no trace.
        parent_action = self._resolve_parent(parent)
        head = self.append(parent_action, submission.data())
        pending = [(head, child) for child in reversed(submission.results)]
        while pending:
            owner, child = pending.pop()
            node = self.append(owner, child.data())
            pending.extend((node, grandchild) for grandchild in reversed(child.results))
        return head

    def _resolve_parent(self, parent: Action | int | None) -> Action | None:
        if parent is None:
            return None
        if isinstance(parent, Action):
            if parent.chain_key != self.key or not self._owns(parent):
                msg = f"Action {parent.id} belongs to a different game"
                raise ReferentialError(msg, parent_id=parent.id)
            return parent
        if not 0 <= parent < len(self._arena):
            msg = f"Parent action {parent} does not exist in this game"
            raise ReferentialError(msg, parent_id=parent)
        return self._arena[parent]

    def _owns(self, action: Action) -> bool:
        return action.id < len(self._arena) and self._arena[action.id] is action

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, action_id: int) -> Action:
        if not 0 <= action_id < len(self._arena):
            msg = f"Action {action_id} does not exist"
            raise NotFoundError(msg, action_id=action_id)
        return self._arena[action_id]

    def find_record(self, record_id: int) -> Action:
        """The persisted action whose store-wide id is *record_id*.

        Raises:
            ReferentialError: No action of this chain carries that id, which
                includes ids belonging to another game.
        """
        for action in self._arena:
            if action.record_id == record_id:
                return action
        msg = f"Action {record_id} is not part of this game"
        raise ReferentialError(msg, parent_id=record_id)

    def roots(self) -> list[Action]:
        return [self._arena[i] for i in self.root_ids]

    def results_of(self, action_id: int) -> list[Action]:
        return [self._arena[i] for i in self.get(action_id).result_ids]

    def flatten(self) -> Iterable[Action]:
        """All actions, depth-first in insertion order. Lazy and restartable."""
        return _Flattened(self)

    def to_tree(self) -> list[dict[str, Any]]:
        """Nested dict rendering of the forest for reporting."""

        def build(action: Action) -> dict[str, Any]:
            node = action.data.model_dump(mode="json")
            node["id"] = action.id
            node["record_id"] = action.record_id
            node["results"] = [build(self._arena[i]) for i in action.result_ids]
            return node

        return [build(root) for root in self.roots()]
