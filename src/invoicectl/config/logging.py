"""Route invoicectl diagnostics through structlog.

Everything goes to stderr so stdout stays reserved for command results.
Human-readable console lines by default; one JSON object per line with
``--log-json``. Stdlib loggers (the services, SQLAlchemy) share the same
formatter through ``ProcessorFormatter``.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

APP_LOGGER = "invoicectl"

# Libraries that are chatty at INFO/DEBUG; they only surface problems.
_PINNED = {"sqlalchemy": logging.WARNING, "pluggy": logging.WARNING}


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _render_chain(log_json: bool) -> list[Processor]:
    # exc_info from stdlib records is attached after the pre-chain runs.
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set invoicectl's level.

    Args:
        verbose: Let invoicectl's DEBUG records through; otherwise WARNING+.
        log_json: Emit JSON lines instead of console output.

    Safe to call repeatedly; each call replaces the root handler.
    """
    pre_chain = _pre_chain()
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
                *_render_chain(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name, level in _PINNED.items():
        logging.getLogger(name).setLevel(level)
