"""Rich Console factory and theme for cardball output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CARDBALL_THEME = Theme(
    {
        "cb.ok": "bold green",
        "cb.error": "bold red",
        "cb.warning": "bold yellow",
        "cb.op": "bold cyan",
        "cb.key": "dim",
        "cb.id": "bold blue",
        "cb.name": "bold",
        "cb.play": "magenta",
        "cb.status.forming": "yellow",
        "cb.status.ready": "cyan",
        "cb.status.in_progress": "green",
        "cb.status.completed": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CARDBALL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a game status."""
    return f"cb.status.{status}" if status else ""
