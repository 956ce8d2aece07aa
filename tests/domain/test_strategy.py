"""Tests for the strategy register."""

import pytest

from cardball.domain.errors import InvalidEnumError
from cardball.domain.strategy import StrategyRegister
from cardball.domain.types import Role


class TestStrategyRegister:
    def test_empty(self) -> None:
        register = StrategyRegister()
        assert len(register) == 0
        assert register.get(Role.HOME_MANAGER) is None

    def test_second_post_replaces_first(self) -> None:
        register = StrategyRegister()
        register.post("home-manager", "bunt")
        register.post("home-manager", "swing away")
        assert register.get(Role.HOME_MANAGER) == "swing away"
        assert register.as_dict() == {"home-manager": "swing away"}

    def test_roles_are_independent(self) -> None:
        register = StrategyRegister()
        register.post(Role.HOME_MANAGER, "steal")
        register.post(Role.VISITING_MANAGER, "pitch around")
        assert register.get("visiting-manager") == "pitch around"
        assert Role.HOME_MANAGER in register
        assert len(register) == 2

    def test_unknown_role(self) -> None:
        register = StrategyRegister()
        with pytest.raises(InvalidEnumError):
            register.post("umpire", "call it tight")
        assert len(register) == 0

    def test_initial_values(self) -> None:
        register = StrategyRegister({"home-manager": "squeeze"})
        assert register.get(Role.HOME_MANAGER) == "squeeze"
