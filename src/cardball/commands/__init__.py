"""Subcommand modules for cardball.

Provides register_commands() which uses deferred imports to keep
``cardball --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from cardball.commands.game import game
    from cardball.commands.team import team

    cli.add_command(team)
    cli.add_command(game)
