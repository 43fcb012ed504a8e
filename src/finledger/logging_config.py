"""Structured logging setup.

Modules obtain loggers through ``get_logger(__name__)`` and emit events as
key/value pairs. Loggers wrap standard library loggers directly, so importing
a module changes no global structlog state; until the entry point calls
``configure_logging``, only warnings and errors reach stderr.
"""

import logging
import sys

import structlog

_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

_renderer = structlog.processors.KeyValueRenderer(key_order=["event"])


def _render(logger, method_name, event_dict):
    # Looked up per event so configure_logging can switch formats later
    return _renderer(logger, method_name, event_dict)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to a module name."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[*_SHARED_PROCESSORS, _render],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def configure_logging(level: str = "WARNING", json: bool = False) -> None:
    """Configure log level and output format for the process.

    Args:
        level: Minimum level name (e.g. "DEBUG", "INFO")
        json: Render events as JSON lines instead of key=value text

    Raises:
        ValueError: If the level name is unknown
    """
    global _renderer

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)
    _renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"])
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, _render],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
