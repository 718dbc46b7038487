"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stargate.output.console import create_console, get_output, style_for_title

if TYPE_CHECKING:
    from rich.console import Console

    from stargate.services.result import ServiceResult


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

    rows = result.data.get("people") or result.data.get("duties") or result.data.get("entries")
    if rows and isinstance(rows, list):
        return "\n".join(str(_row_id(row)) for row in rows)

    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _row_id(row: dict[str, Any]) -> Any:
    return row.get("person_id", row.get("id", ""))


def _blank(value: Any) -> str:
    return "" if value is None else str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK line with op and status code."""
    console.print(
        Text("OK", style="sg.ok"),
        Text(f"  {result.op}", style="sg.op"),
        Text(f"  [{result.status_code}]", style="dim"),
    )


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="sg.key")
    if key == "id" or key.endswith("_id"):
        v = Text(_blank(value), style="sg.id")
    elif key == "name":
        v = Text(_blank(value), style="sg.name")
    elif key.endswith("_date"):
        v = Text(_blank(value), style="sg.date")
    else:
        v = Text(_blank(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, span tree included (verbose only)."""
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, indent=4)
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    console.print(f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}")
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _person_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Name", style="sg.name")
    table.add_column("Rank")
    table.add_column("Duty Title")
    table.add_column("Career Start", style="sg.date")
    table.add_column("Career End", style="sg.date")
    for row in rows:
        title = _blank(row.get("current_duty_title"))
        table.add_row(
            _blank(row.get("person_id")),
            _blank(row.get("name")),
            _blank(row.get("current_rank")),
            Text(title, style=style_for_title(title)),
            _blank(row.get("career_start_date")),
            _blank(row.get("career_end_date")),
        )
    return table


def _duty_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Rank")
    table.add_column("Duty Title")
    table.add_column("Start", style="sg.date")
    table.add_column("End", style="sg.date")
    for row in rows:
        title = _blank(row.get("duty_title"))
        end = row.get("duty_end_date")
        table.add_row(
            _blank(row.get("id")),
            _blank(row.get("rank")),
            Text(title, style=style_for_title(title)),
            _blank(row.get("duty_start_date")),
            Text("current", style="sg.open") if end is None else Text(str(end)),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="sg.error"),
        Text(f"  {result.op}", style="sg.op"),
        Text(f"  [{result.status_code}]", style="dim"),
        Text(" — "),
        Text(msg),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Command renderers ─────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/rename/amend results."""
    _status_line(console, result)
    if result.message:
        console.print(f"  {result.message}")
    data = dict(result.data)
    duty = data.pop("duty", None)
    for key, value in data.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value) or "-"
        _field(console, key, value)
    if duty:
        console.print()
        console.print(_duty_table([duty]))
    if verbose:
        _render_meta(console, result)


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("db_path", "seeded", "people", "duties"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_person(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    person = result.data.get("person")
    if not person:
        console.print(result.message or "No person found.")
        return

    lines = [
        f"rank: {_blank(person.get('current_rank')) or '-'}",
        f"duty title: {_blank(person.get('current_duty_title')) or '-'}",
        f"career start: {_blank(person.get('career_start_date')) or '-'}",
        f"career end: {_blank(person.get('career_end_date')) or '-'}",
    ]
    title = f"{person.get('person_id', '?')} — {person.get('name', '?')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_duties(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    person = result.data.get("person")
    if not person:
        console.print(result.message or "No person found.")
        return

    console.print(_person_table([person]))
    console.print()
    console.print(_duty_table(result.data.get("duties", [])))
    console.print(f"\n{result.data.get('count', 0)} duties")
    if verbose:
        _render_meta(console, result)


def _render_people(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    people = result.data.get("people", [])
    console.print(_person_table(people))
    console.print(f"\n{result.data.get('count', len(people))} people")
    if verbose:
        _render_meta(console, result)


def _render_process_log(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    entries = result.data.get("entries", [])
    level_styles = {"ERROR": "sg.error", "WARNING": "sg.warning", "SUCCESS": "sg.ok"}
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Timestamp", style="dim")
    table.add_column("Level")
    table.add_column("Message")
    if verbose:
        table.add_column("Request")
    for entry in entries:
        level = _blank(entry.get("level"))
        row: list[Any] = [
            _blank(entry.get("id")),
            _blank(entry.get("timestamp")),
            Text(level, style=level_styles.get(level, "")),
            _blank(entry.get("message")),
        ]
        if verbose:
            row.append(_blank(entry.get("request_data")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(entries))} entries")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    # Commands
    "create_person": _render_mutation,
    "rename_person": _render_mutation,
    "create_duty": _render_mutation,
    "amend_duty": _render_mutation,
    "init_roster": _render_init,
    # Queries
    "get_person": _render_person,
    "get_duties": _render_duties,
    "list_people": _render_people,
    "list_process_log": _render_process_log,
}
