"""Common utilities and shared functionality."""

from .context import CancellationToken, Deadline
from .exceptions import (
    ConfigurationError,
    NgrokProbeError,
    ProbeCancelledError,
)
from .logging import get_logger, setup_logging
from .utils import (
    MAX_PORT,
    MIN_PORT,
    build_inspection_url,
    is_secure_url,
    validate_non_empty_string,
    validate_port,
)

__all__ = [
    # Cancellation and deadlines
    "CancellationToken",
    "Deadline",
    # Exceptions
    "NgrokProbeError",
    "ConfigurationError",
    "ProbeCancelledError",
    # Logging
    "get_logger",
    "setup_logging",
    # Utils
    "validate_port",
    "validate_non_empty_string",
    "build_inspection_url",
    "is_secure_url",
    "MIN_PORT",
    "MAX_PORT",
]
