"""Payload-shaped Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
extracts the text via ``get_output(console)``. Successful results are
dispatched on the shape of ``result.data``:

- ``items``: entity list, rendered as a table
- ``values``: attribute set, rendered as a bullet list
- ``id`` + ``status``: single entity, rendered as a panel
- anything else: generic key-value lines
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jobreg.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from jobreg.services.result import ServiceResult

# Kind-specific scalar fields shown after the shared ones
_EXTRA_FIELDS = ("executable", "job_type", "application_id", "cluster_type")


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if not result.ok:
        _render_error(result, console, verbose=verbose)
    elif "items" in result.data:
        _render_item_table(result, console, verbose=verbose)
    elif "values" in result.data:
        _render_attribute_set(result, console)
    elif "id" in result.data and "status" in result.data:
        _render_entity(result, console, verbose=verbose)
    else:
        _render_generic(result, console)

    if verbose and result.ok:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: ids for lists, members for sets."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if "items" in result.data:
        return "\n".join(str(item["id"]) for item in result.data["items"])
    if "values" in result.data:
        return "\n".join(result.data["values"])
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="jobreg.ok"), Text(f"  {result.op}", style="jobreg.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="jobreg.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="jobreg.id")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            duration = value.get("duration_ms", 0.0)
            console.print(f"    [dim]{duration:>8.2f}ms[/dim]  {value.get('name', '?')}")
        else:
            console.print(f"    {key}: {value}")


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="jobreg.error"),
        Text(f"  {result.op}{code}", style="jobreg.op"),
        Text(f": {msg}"),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")


def _render_entity(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    lines: list[str] = []
    for key in ("user", "version", "status", *_EXTRA_FIELDS):
        value = d.get(key)
        if value is not None:
            lines.append(f"{key}: {value}")
    for key in ("tags", "configs", "jars"):
        members = d.get(key) or []
        if members:
            lines.append(f"{key}: {', '.join(members)}")
    if verbose:
        lines.append(f"created: {d.get('created')}")
        lines.append(f"updated: {d.get('updated')}")

    _status_line(console, result)
    title = f"{d.get('id', '?')}: {d.get('name', '')}"
    border = style_for_status(str(d.get("status", ""))) or "dim"
    console.print(Panel("\n".join(lines), title=title, border_style=border, expand=False))


def _render_item_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    _status_line(console, result)
    if not items:
        console.print("  (none)")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="jobreg.id", no_wrap=True)
    table.add_column("Name", style="jobreg.name")
    table.add_column("User")
    table.add_column("Version")
    table.add_column("Status")
    if verbose:
        table.add_column("Updated", style="dim")

    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("user", "")),
            str(item.get("version", "")),
            Text(status, style=style_for_status(status)),
        ]
        if verbose:
            row.append(str(item.get("updated", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} items")


def _render_attribute_set(result: ServiceResult, console: Console) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, d.get("attribute", "values"), d.get("count", 0))
    for value in d.get("values", []):
        console.print(f"    - {value}")


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
