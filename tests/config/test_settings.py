"""Tests for CardballSettings and its source priority."""

from pathlib import Path

import click
import pytest

from cardball.config.settings import CardballSettings


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CARDBALL_CONFIG", raising=False)


class TestDefaults:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = CardballSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.database.path == ".cardball/cardball.db"
        assert settings.plugins.enabled is True
        assert settings.demo.game_name == "Sneaky little game"

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = CardballSettings.from_cli(project_root=tmp_path, json_output=True, quiet=True)
        assert settings.json_output
        assert settings.quiet


class TestToml:
    def test_discovered_file_sets_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "cardball.toml").write_text('[database]\npath = "games.db"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = CardballSettings.from_cli()
        assert settings.project_root == tmp_path.resolve()
        assert settings.database.path == "games.db"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[demo]\ngame_name = "Doubleheader"\n')
        settings = CardballSettings.from_cli(config_path=str(cfg), project_root=tmp_path)
        assert settings.config_path == cfg
        assert settings.demo.game_name == "Doubleheader"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "cardball.toml"
        cfg.write_text("[database\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            CardballSettings.from_cli(config_path=str(cfg))


class TestEnv:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "cardball.toml").write_text("[plugins]\nenabled = true\n")
        monkeypatch.setenv("CARDBALL_PLUGINS__ENABLED", "false")
        settings = CardballSettings.from_cli(project_root=tmp_path)
        assert settings.plugins.enabled is False

    def test_cli_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CARDBALL_VERBOSE", "false")
        settings = CardballSettings.from_cli(project_root=tmp_path, verbose=True)
        assert settings.verbose
