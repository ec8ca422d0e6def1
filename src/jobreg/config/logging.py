"""Log routing for the jobreg CLI.

Services log through ``logging.getLogger(__name__)``: cascades and
rejected operations at INFO, store failures at ERROR, per-write detail
at DEBUG. Telemetry spans come from structlog directly. Both streams
share one stderr handler, so stdout carries nothing but command results
and stays safe to pipe (``jobreg --json app list | jq``).
"""

from __future__ import annotations

import logging
import sys

import structlog

# Libraries whose INFO chatter would drown out registry events under --verbose.
# SQL echo is opted into separately through ``[database] echo``.
_HELD_AT_WARNING = ("sqlalchemy",)


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Install the single stderr handler and set registry log levels.

    Safe to call more than once; each call replaces the previous handler.

    Args:
        verbose: Show ``jobreg`` DEBUG and INFO records (cascades, spans).
            Otherwise only warnings and errors reach stderr.
        log_json: One JSON object per line with ``event``, ``level``,
            ``logger`` and ``timestamp`` keys.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("jobreg").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _HELD_AT_WARNING:
        logging.getLogger(name).setLevel(logging.WARNING)
