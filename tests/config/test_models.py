"""Tests for configuration section models."""

import pydantic
import pytest

from cardball.config.models import CardballConfig, DatabaseConfig


class TestCardballConfig:
    def test_defaults(self) -> None:
        config = CardballConfig()
        assert config.database.path == ".cardball/cardball.db"
        assert config.demo.visiting_nickname == "Phillies"
        assert config.demo.home_nickname == "Rockies"
        assert config.plugins.enabled is True

    def test_partial_section(self) -> None:
        config = CardballConfig.model_validate({"database": {"echo": True}})
        assert config.database.echo is True
        assert config.database.path == ".cardball/cardball.db"

    def test_frozen(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            DatabaseConfig().echo = True  # type: ignore[misc]
