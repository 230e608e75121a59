"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from typedwire.output.console import create_console, get_output, style_for_tag

if TYPE_CHECKING:
    from rich.console import Console

    from typedwire.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
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
    if "root" in result.data:
        return str(result.data["root"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="tw.ok"), Text(f"  {result.op}", style="tw.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tw.key")
    if key in ("path", "output_file"):
        v = Text(str(value), style="tw.path")
    elif key == "root":
        v = Text(str(value), style=style_for_tag(str(value)))
    elif isinstance(value, int) and not isinstance(value, bool):
        v = Text(str(value), style="tw.count")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
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


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tw.error")
    op = Text(f"  {result.op}", style="tw.op")
    console.print(label, op, Text(" — "), msg)
    if err:
        console.print(Text(f"  code: {err.code}", style="dim"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Op renderers ──────────────────────────────────────────────────────


def _render_written(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render encode/decode/binary results whose content went to a file."""
    _status_line(console, result)
    for key in ("root", "output_file", "path", "size", "chars"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_inspect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("root", "envelopes", "depth", "invalid"):
        if key in d:
            _field(console, key, d[key])

    tags: dict[str, int] = d.get("tags", {})
    if tags:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Tag", no_wrap=True)
        table.add_column("Count", style="tw.count", justify="right")
        for tag, count in tags.items():
            table.add_row(Text(tag, style=style_for_tag(tag)), str(count))
        console.print(table)

    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "encode": _render_written,
    "decode": _render_written,
    "binary_encode": _render_written,
    "binary_decode": _render_written,
    "inspect": _render_inspect,
}
