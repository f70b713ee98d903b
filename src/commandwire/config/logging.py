"""structlog configuration for commandwire.

commandwire is a library: modules log through ``logging.getLogger(__name__)``
and the embedding application owns the root logger. :func:`configure_logging`
only touches the ``commandwire`` logger. It installs one structlog-formatted
stderr handler there and stops propagation, so root handlers set up by the
application are left alone.

- Human (default): console-rendered output
- JSON (``log_json``): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from commandwire.config.settings import WireSettings

LOGGER_NAME = "commandwire"

# Marks handlers installed here so repeat calls replace only our own.
_HANDLER_MARK = "_commandwire_handler"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def build_handler(*, log_json: bool = False) -> logging.Handler:
    """Return a stderr handler that renders stdlib and structlog records alike."""
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_MARK, True)
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route ``commandwire`` log records through structlog.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    wire_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(wire_logger.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            wire_logger.removeHandler(existing)
    wire_logger.addHandler(build_handler(log_json=log_json))
    wire_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    wire_logger.propagate = False


def configure_from_settings(settings: WireSettings) -> None:
    """Apply the ``verbose`` / ``log_json`` flags from *settings*."""
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
