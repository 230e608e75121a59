"""structlog setup for the typedwire CLI.

Everything goes to stderr; stdout carries only wire text and results.
The codec modules log through plain ``logging.getLogger(__name__)`` with
%-style arguments, so those records run through the same chain as
structlog's own loggers.

- Console (default): level, logger and event; colored on a TTY
- JSON (--log-json): one object per line with an ISO timestamp
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "typedwire"


def _shared_processors(*, log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_json:
        # Timestamps only in JSON output.
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
        processors.append(structlog.processors.dict_tracebacks)
    return processors


def _renderer(*, log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), pad_event=0)


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib records from typedwire to stderr.

    Args:
        verbose: DEBUG for the ``typedwire`` logger (dropped members,
            lenient-parse recoveries, spans). When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared = _shared_processors(log_json=log_json)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json=log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
