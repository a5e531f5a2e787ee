"""Structured logging for the probe, scoped to the ``ngrok_probe`` logger tree.

Loggers returned by :func:`get_logger` run their own structlog processor
chain and emit through standard library loggers under ``ngrok_probe``. Neither
the global structlog configuration nor the root logger is touched, so the host
application keeps control of both.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog
from structlog.typing import Processor

PACKAGE_LOGGER = "ngrok_probe"
CONSOLE_HANDLER = "ngrok_probe.console"
FILE_HANDLER = "ngrok_probe.file"

_renderer: Processor = structlog.dev.ConsoleRenderer(colors=False)


def _render(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> str:
    return _renderer(logger, method_name, event_dict)  # type: ignore[return-value]


_PROCESSORS: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    _render,
]


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach output handlers to the ``ngrok_probe`` logger.

    Calling this again replaces the handlers it added before. Handlers the
    application attached itself are left alone. Records stop propagating to
    the root logger once the package has its own handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, output JSON formatted logs
        log_file: Optional file path to write logs to
        stream: Console stream, stdout by default

    Returns:
        The configured package logger
    """
    global _renderer

    log_level = getattr(logging, level.upper())

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.set_name(CONSOLE_HANDLER)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(console_handler)

    if json_format:
        _renderer = structlog.processors.JSONRenderer()
    else:
        _renderer = structlog.dev.ConsoleRenderer(colors=log_file is None)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.set_name(FILE_HANDLER)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module of this package.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog logger bound to the standard library logger ``name``
    """
    return structlog.wrap_logger(  # type: ignore[no-any-return]
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
