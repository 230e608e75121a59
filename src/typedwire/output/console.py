"""Rich Console factory and theme for typedwire output.

Consoles render into a StringIO buffer so renderers keep the
``format_result() -> str`` contract. Rich drops color codes on its own in
non-TTY environments (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TW_THEME = Theme(
    {
        "tw.ok": "bold green",
        "tw.error": "bold red",
        "tw.warning": "bold yellow",
        "tw.op": "bold cyan",
        "tw.key": "dim",
        "tw.path": "dim",
        "tw.count": "magenta",
        "tw.tag.scalar": "green",
        "tw.tag.binary": "yellow",
        "tw.tag.container": "blue",
        "tw.tag.absent": "dim",
    }
)

_TAG_STYLES: dict[str, str] = {
    "number": "tw.tag.scalar",
    "string": "tw.tag.scalar",
    "boolean": "tw.tag.scalar",
    "binary": "tw.tag.binary",
    "array": "tw.tag.container",
    "object": "tw.tag.container",
    "map": "tw.tag.container",
    "null": "tw.tag.absent",
    "undefined": "tw.tag.absent",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=TW_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_tag(tag: str) -> str:
    """Return the Rich style name for an envelope tag."""
    return _TAG_STYLES.get(tag, "")
