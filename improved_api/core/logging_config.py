# ==============================================================================
# LOGGING CONFIGURATION
# ==============================================================================
# Root logger setup driven by LOG_LEVEL / LOG_FORMAT settings
# JSON lines are rendered by structlog on top of the stdlib handlers
# ==============================================================================

from __future__ import annotations

import logging

import structlog

from improved_api.core.settings import Settings

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_MARKER = "_improved_api"


def json_formatter() -> logging.Formatter:
    """Formatter emitting one JSON object per record."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(settings: Settings) -> logging.Handler:
    """
    Configure the root logger.

    The handler installed by a previous call is replaced, so building
    several applications (e.g. in tests) never stacks handlers.

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL)

    for handler in list(root.handlers):
        if getattr(handler, HANDLER_MARKER, False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    if settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    setattr(handler, HANDLER_MARKER, True)
    root.addHandler(handler)
    return handler
