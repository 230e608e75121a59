"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns the CodecService and result emission
(stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from typedwire.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from typedwire.config.settings import TypedwireSettings
    from typedwire.services.codec import CodecService
    from typedwire.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: TypedwireSettings) -> None:
        self.settings = settings
        self._service: CodecService | None = None

        from typedwire.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from typedwire.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def service(self) -> CodecService:
        """The codec service (created lazily on first access)."""
        if self._service is None:
            from typedwire.services.codec import CodecService

            self._service = CodecService(self.settings.codec_options, self.settings.output)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                self._echo_warnings(result)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_content(self, result: ServiceResult, output_file: str | None = None) -> None:
        """Deliver ``result.data["content"]`` to a file or raw to stdout.

        When the content goes to a file, or ``--json`` is set and the
        content is bytes, a summary without the content is emitted instead.
        """
        if not result.ok:
            self.emit(result)
            return

        content = result.data["content"]
        summary = result.model_copy(
            update={"data": {k: v for k, v in result.data.items() if k != "content"}}
        )
        if output_file:
            path = Path(output_file)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
            self.emit(
                summary.model_copy(update={"data": {**summary.data, "output_file": output_file}})
            )
        elif self.settings.json_output:
            self.emit(summary if isinstance(content, bytes) else result)
        else:
            # Pipe-friendly: raw content to stdout
            self._echo_warnings(result)
            if isinstance(content, bytes):
                click.get_binary_stream("stdout").write(content)
            else:
                click.echo(content)

    def _echo_warnings(self, result: ServiceResult) -> None:
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
