"""structlog configuration for stargate.

Diagnostics go to stderr, either console-rendered (default) or as JSON
lines (``--log-json``). Every event logged while a command runs carries
the ``action`` bound by :func:`bind_action`, the same ``command.action``
name the process log records.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _app_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        verbose: ``stargate`` loggers emit DEBUG and up. Wins over *quiet*.
        quiet: ``stargate`` loggers emit ERROR and up.
        log_json: Render JSON lines; exception info becomes a string field.
    """
    structlog.contextvars.clear_contextvars()

    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor
    if log_json:
        shared.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("stargate").setLevel(_app_level(verbose=verbose, quiet=quiet))
    # no SQL echo, even with -v
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def bind_action(command: str, action: str) -> None:
    """Tag subsequent log events with ``action="command.action"``."""
    structlog.contextvars.bind_contextvars(action=f"{command}.{action}")
