"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from lambdaplay.output.console import create_console, expression_text, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from lambdaplay.services.result import ServiceResult

Renderer = Callable[..., None]


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
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Prints the one value a script would pipe onward: the reduced or
    expanded expression, a body, or the list of names.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op == "reduce":
        return str(data.get("to", ""))
    if result.op == "expand":
        return str(data.get("expanded", ""))
    if result.op == "show_expression":
        return str(data.get("body", ""))
    if result.op == "list_expressions":
        return "\n".join(item["name"] for item in data.get("items", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="lp.ok")
    op = Text(f"  {result.op}", style="lp.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="lp.key")
    if key == "name":
        v = Text(str(value), style="lp.name")
    elif key in ("body", "expression", "current_expression"):
        v = expression_text(str(value))
    elif key == "expanded":
        v = expression_text(str(value), style="lp.expanded")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _transition(console: Console, before: str, after: str) -> None:
    line = Text("  ")
    line.append_text(expression_text(before))
    line.append("  →  ", style="lp.arrow")
    line.append_text(expression_text(after))
    console.print(line)


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


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line, markup=True)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _expression_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="lp.name", no_wrap=True)
    table.add_column("Expression", style="lp.expr")
    for index, item in enumerate(items, start=1):
        table.add_row(
            str(index), str(item.get("name", "")), expression_text(str(item.get("body", "")))
        )
    return table


def _history_table(steps: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Step", style="dim", justify="right")
    table.add_column("From", style="lp.expr")
    table.add_column("To", style="lp.expr")
    for index, reduction in enumerate(steps, start=1):
        table.add_row(
            str(index),
            expression_text(str(reduction.get("from", ""))),
            expression_text(str(reduction.get("to", ""))),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="lp.error")
    op = Text(f"  {result.op}", style="lp.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Library renderers ─────────────────────────────────────────────────


def _render_saved(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("name", "body", "removed", "count", "library_size"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_expression_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(Text("No saved expressions yet.", style="dim"))
        return
    console.print(_expression_table(items))
    console.print(f"\n{result.data.get('count', len(items))} expressions")


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _field(console, "name", result.data.get("name", ""))
    _field(console, "body", result.data.get("body", ""))


# ── Reduction renderers ───────────────────────────────────────────────


def _render_reduce(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    if d.get("progressed"):
        _transition(console, str(d.get("from", "")), str(d.get("to", "")))
    else:
        _field(console, "expression", d.get("to", ""))
    if verbose and d.get("expanded") != d.get("from"):
        _field(console, "expanded", d.get("expanded", ""))
    if "history_length" in d:
        _field(console, "history_length", d["history_length"])


def _render_expand(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "expression", d.get("expression", ""))
    _field(console, "expanded", d.get("expanded", ""))
    refs = d.get("references") or []
    if refs:
        _field(console, "references", ", ".join(refs))


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    steps = result.data.get("steps", [])
    if not steps:
        console.print(Text("No reductions yet.", style="dim"))
        return
    console.print(_history_table(steps))


def _render_workspace(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _field(console, "current_expression", d.get("current_expression", ""))
    if d.get("message"):
        console.print(Text(f"  {d['message']}", style="lp.warning"))
    library = d.get("library", [])
    if library:
        console.print()
        console.print(_expression_table(library))
    history = d.get("history", [])
    if history:
        console.print()
        console.print(_history_table(history))


def _render_workspace_change(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "current_expression", result.data.get("current_expression", ""))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    # Library
    "save_expression": _render_saved,
    "delete_expression": _render_saved,
    "list_expressions": _render_expression_list,
    "show_expression": _render_show,
    # Reduction
    "reduce": _render_reduce,
    "expand": _render_expand,
    "history": _render_history,
    # Workspace
    "workspace": _render_workspace,
    "edit": _render_workspace_change,
    "apply": _render_workspace_change,
    "clear_history": _render_workspace_change,
}
