"""Custom exceptions for the ngrok probe."""


class NgrokProbeError(Exception):
    """Base exception for all ngrok probe errors."""
    pass


class ConfigurationError(NgrokProbeError):
    """Raised when a probe or resource is used in an invalid way."""
    pass


class ProbeCancelledError(NgrokProbeError):
    """Raised inside a probe run when its cancellation token fires."""
    pass
