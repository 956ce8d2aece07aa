"""Click command classes that carry usage examples.

``cardball game put-lineup --examples`` prints sample invocations and
exits; ``--help`` stays short and only points at the flag.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Any

import click


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(dedent(examples).strip("\n"))
    ctx.exit(0)


_EXAMPLES_OPTION = click.Option(
    ["--examples"],
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_show_examples,
    help="Show usage examples and exit.",
)


class _ExamplesMixin:
    """Adds ``--examples`` to any command constructed with ``examples=``."""

    examples: str | None

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params: list[click.Parameter] = super().get_params(ctx)  # type: ignore[misc]
        if self.examples:
            params.insert(-1, _EXAMPLES_OPTION)
        return params

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text("Run with --examples to see sample invocations.")


class CardballCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples


class CardballGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`CardballCommand` by default."""

    command_class = CardballCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
