"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cardball.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- cardball.toml sections ---


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = ".cardball/cardball.db"
    echo: bool = False


class DemoConfig(BaseModel):
    """[demo] section — names used by ``cardball game demo``."""

    model_config = {"frozen": True}

    game_name: str = "Sneaky little game"
    visiting_city: str = "Philadelphia"
    visiting_nickname: str = "Phillies"
    home_city: str = "Colorado"
    home_nickname: str = "Rockies"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class CardballConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
