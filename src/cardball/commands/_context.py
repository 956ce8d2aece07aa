"""Per-invocation state handed to every command via ``@click.pass_obj``."""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING

import click

from cardball.config.logging import configure_logging
from cardball.output.formatters import OutputSettings, format_result
from cardball.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from cardball.config.settings import CardballSettings
    from cardball.infrastructure.store import Store
    from cardball.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Settings, the lazily opened store, and result emission.

    Opening the store creates the database, so it waits until a command
    actually needs it; ``--help`` and ``--version`` never touch disk.
    """

    def __init__(self, settings: CardballSettings) -> None:
        self.settings = settings
        self._store: Store | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def store(self) -> Store:
        if self._store is None:
            from cardball.infrastructure.store import Store

            self._store = Store(self.settings)
            self._store.init_plugins()
        return self._store

    @cached_property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def close(self) -> None:
        """Release the database engine if one was opened."""
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Success goes to stdout with warnings on stderr (JSON output already
        carries them). Failure goes to stderr and exits 1.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            code = result.error.code if result.error else "ERROR"
            logger.debug("%s failed with %s", result.op, code)
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
