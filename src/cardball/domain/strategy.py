"""Strategy register: the latest directive per managerial role."""

from __future__ import annotations

from collections.abc import Mapping

from cardball.domain.types import Role


class StrategyRegister:
    """Holds one strategy string per :class:`Role`. No history is kept."""

    def __init__(self, initial: Mapping[Role | str, str] | None = None) -> None:
        self._current: dict[Role, str] = {}
        for role, text in (initial or {}).items():
            self.post(role, text)

    def post(self, role: Role | str, strategy: str) -> Role:
        """Store *strategy* as the current value for *role*, replacing any prior one."""
        parsed = Role.parse(role)
        self._current[parsed] = strategy
        return parsed

    def get(self, role: Role | str) -> str | None:
        return self._current.get(Role.parse(role))

    def as_dict(self) -> dict[str, str]:
        return {str(role): text for role, text in self._current.items()}

    def __len__(self) -> int:
        return len(self._current)

    def __contains__(self, role: object) -> bool:
        return role in self._current
