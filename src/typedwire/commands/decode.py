"""Command: decode envelope wire text into plain JSON."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from typedwire.commands._base import TwCommand

if TYPE_CHECKING:
    from typedwire.commands._context import AppContext


@click.command(
    cls=TwCommand,
    examples="""\
  typedwire encode doc.json | typedwire decode
  typedwire decode document.tw.json --output document.json
  typedwire --strict decode untrusted.tw.json""",
)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def decode(app: AppContext, source: TextIO, output_file: str | None) -> None:
    """Decode envelope text from SOURCE (default: stdin) into plain JSON.

    Blobs are shown as base64 strings and maps as lists of [key, value]
    pairs, since plain JSON has no shape for either.
    """
    result = app.service.decode_text(source.read())
    app.emit_content(result, output_file)
