"""Command: summarize the tag tree of envelope wire text."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from typedwire.commands._base import TwCommand

if TYPE_CHECKING:
    from typedwire.commands._context import AppContext


@click.command(
    "inspect",
    cls=TwCommand,
    examples="""\
  typedwire inspect document.tw.json
  typedwire --json inspect document.tw.json""",
)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def inspect_cmd(app: AppContext, source: TextIO) -> None:
    """Count tags and measure depth of the envelope tree in SOURCE."""
    app.emit(app.service.inspect_text(source.read()))
