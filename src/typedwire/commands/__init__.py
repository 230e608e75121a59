"""Subcommand modules for typedwire.

register_commands() imports lazily so ``typedwire --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``binary`` group and the standalone commands on the root group."""
    # --- Groups ---
    from typedwire.commands.binary import binary

    cli.add_command(binary)

    # --- Standalone commands ---
    from typedwire.commands.decode import decode
    from typedwire.commands.encode import encode
    from typedwire.commands.inspect_cmd import inspect_cmd

    cli.add_command(encode)
    cli.add_command(decode)
    cli.add_command(inspect_cmd)
