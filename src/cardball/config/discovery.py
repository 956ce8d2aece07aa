"""Locating and reading ``cardball.toml``.

The file is found the way git finds ``.git``: the first match walking up
from the working directory. ``CARDBALL_CONFIG`` pins an explicit file and
disables the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from cardball.config.models import CardballConfig

CONFIG_FILENAME = "cardball.toml"
CONFIG_ENV_VAR = "CARDBALL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies at *start* (default: cwd), if any."""
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, turning syntax errors into a CLI-friendly exception."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> CardballConfig:
    """Validated config sections from *path*, or from the discovered file.

    Sections missing from the file keep their code defaults; with no file
    at all the result is ``CardballConfig()``.
    """
    path = path or find_config(cwd)
    if path is None:
        return CardballConfig()
    return CardballConfig.model_validate(read_toml(path))
