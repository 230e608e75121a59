"""Command group: base64 byte <-> text transform."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import click

from typedwire.commands._base import TwGroup

if TYPE_CHECKING:
    from typedwire.commands._context import AppContext

_BINARY_EXAMPLES = """\
  typedwire binary encode image.png
  typedwire binary decode image.b64 --output image.png
  echo AAEC | typedwire --strict binary decode --output out.bin"""


@click.group(cls=TwGroup, examples=_BINARY_EXAMPLES)
def binary() -> None:
    """Convert between raw bytes and base64 text."""


@binary.command(
    "encode",
    examples="""\
  typedwire binary encode image.png
  typedwire binary encode image.png --output image.b64""",
)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def binary_encode(app: AppContext, path: Path, output_file: str | None) -> None:
    """Encode the bytes of PATH as base64 text."""
    app.emit_content(app.service.encode_binary_file(path), output_file)


@binary.command(
    "decode",
    examples="""\
  typedwire binary decode image.b64 --output image.png
  cat image.b64 | typedwire binary decode > image.png""",
)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to write raw bytes to stdout).",
)
@click.pass_obj
def binary_decode(app: AppContext, source: TextIO, output_file: str | None) -> None:
    """Decode base64 text from SOURCE (default: stdin) into bytes."""
    app.emit_content(app.service.decode_binary_text(source.read()), output_file)
