"""Command: encode a plain JSON document into envelope wire text."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from typedwire.commands._base import TwCommand

if TYPE_CHECKING:
    from typedwire.commands._context import AppContext


@click.command(
    cls=TwCommand,
    examples="""\
  echo '{"a": [1, null]}' | typedwire encode
  typedwire encode document.json --output document.tw.json
  typedwire encode --blob-prefix base64: payload.json""",
)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.option(
    "--blob-prefix",
    default=None,
    help="Treat strings starting with this prefix as base64 blobs.",
)
@click.pass_obj
def encode(
    app: AppContext,
    source: TextIO,
    output_file: str | None,
    blob_prefix: str | None,
) -> None:
    """Encode a JSON document from SOURCE (default: stdin) into envelopes."""
    result = app.service.encode_text(source.read(), blob_prefix=blob_prefix)
    app.emit_content(result, output_file)
