"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from cardball.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from cardball.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict))

    if "action_id" in result.data:
        return str(result.data["action_id"])
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="cb.ok")
    op = Text(f"  {result.op}", style="cb.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cb.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cb.id")
    elif key == "name":
        v = Text(str(value), style="cb.name")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    elif key == "play":
        v = Text(str(value), style="cb.play")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations")
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _lineup_table(title: str, lineup: list[dict[str, Any]]) -> Table:
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    table.add_column("#", justify="right")
    table.add_column("Pos")
    table.add_column("Player", style="cb.name")
    table.add_column("ID", style="cb.id")
    for p in lineup:
        table.add_row(
            str(p["batting_order"] + 1),
            str(p["position"]),
            str(p["player"]),
            str(p["player_id"]),
        )
    return table


def _action_label(node: dict[str, Any]) -> Text:
    ref = node.get("record_id")
    label = Text(f"[{ref if ref is not None else node['id']}] ")
    label.append(str(node["play"]), style="cb.play")
    if node.get("modifier"):
        label.append(f"/{node['modifier']}")
    label.append(f"  outs={node['outs']} count={node['balls']}-{node['strikes']}", style="dim")
    if node.get("runs"):
        label.append(f"  runs={node['runs']} rbi={node['rbis']}")
    return label


def _add_action_nodes(branch: Tree, nodes: list[dict[str, Any]]) -> None:
    for node in nodes:
        child = branch.add(_action_label(node))
        _add_action_nodes(child, node.get("results", []))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cb.error")
    op = Text(f"  {result.op}", style="cb.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/put/post/record results as key-value lines."""
    _status_line(console, result)
    for key in (
        "id",
        "team_id",
        "name",
        "side",
        "role",
        "strategy",
        "action_id",
        "parent_id",
        "play",
        "actions_added",
        "status",
    ):
        if key in result.data and result.data[key] is not None:
            _field(console, key, result.data[key])
    if result.data.get("lineup"):
        console.print(_lineup_table(str(result.data.get("side", "")), result.data["lineup"]))
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_game(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_game as a panel, lineups, strategies and an action tree."""
    d = result.data
    status = str(d.get("status", ""))
    lines = [
        f"visiting: {d['visiting_team']['name']} (team {d['visiting_team']['id']})",
        f"home: {d['home_team']['name']} (team {d['home_team']['id']})",
        f"status: {status}",
        f"actions: {d.get('action_count', 0)}",
    ]
    for role, text in d.get("strategies", {}).items():
        lines.append(f"{role}: {text}")
    title = f"{d.get('id', '?')} — {d.get('name', 'Untitled')}"
    console.print(
        Panel(
            "\n".join(lines),
            title=title,
            border_style=style_for_status(status) or "dim",
            expand=False,
        )
    )

    for side, lineup in d.get("lineups", {}).items():
        if lineup:
            console.print(_lineup_table(side, lineup))

    actions = d.get("actions", [])
    if actions:
        tree = Tree("actions")
        _add_action_nodes(tree, actions)
        console.print(tree)
    if verbose:
        _render_meta(console, result)


def _render_lineups(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for side in ("visiting", "home"):
        lineup = result.data.get(side, [])
        if lineup:
            console.print(_lineup_table(side, lineup))
        else:
            console.print(f"{side}: (empty)")


def _render_team(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="cb.id", no_wrap=True)
    table.add_column("Player", style="cb.name")
    table.add_column("Year")
    table.add_column("Pos")
    table.add_column("B/T")
    table.add_column("Avg", justify="right")
    for p in d.get("players", []):
        table.add_row(
            str(p["id"]),
            str(p["name"]),
            str(p.get("year") or ""),
            str(p.get("position") or ""),
            f"{p['bats']}/{p['throws']}",
            f".{p['average']:03d}",
        )
    title = f"{d.get('id', '?')} — {d.get('name', '')}"
    manager = d.get("manager") or "no manager"
    console.print(Panel(table, title=title, subtitle=manager, expand=False))


def _render_item_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_games / list_teams results as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    columns = list(items[0].keys()) if items else ["id", "name"]
    for col in columns:
        style = "cb.id" if col == "id" else ("cb.name" if col == "name" else None)
        table.add_column(col.replace("_", " ").title(), style=style)
    for item in items:
        table.add_row(*(str(item.get(col, "")) for col in columns))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} items")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Games
    "create_game": _render_mutation,
    "create_demo": _render_mutation,
    "put_lineup": _render_mutation,
    "post_strategy": _render_mutation,
    "record_action": _render_mutation,
    "complete_game": _render_mutation,
    "get_game": _render_game,
    "list_games": _render_item_table,
    "list_lineups": _render_lineups,
    "game_status": _render_mutation,
    # Teams
    "create_team": _render_team,
    "get_team": _render_team,
    "add_player": _render_mutation,
    "list_teams": _render_item_table,
}
