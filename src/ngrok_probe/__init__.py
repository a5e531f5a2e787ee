"""ngrok probe - discover the public URL of a local tunneling agent."""

from .api import discover_public_url, wait_for_public_url
from .common.context import CancellationToken, Deadline
from .common.exceptions import (
    ConfigurationError,
    NgrokProbeError,
    ProbeCancelledError,
)
from .common.logging import get_logger, setup_logging
from .discovery import (
    DiscoveryProbe,
    DiscoveryResult,
    ProbeConfig,
    ProbeOutcome,
    ResultSlot,
)
from .inspection import (
    FailureKind,
    InspectionClient,
    InspectionFailure,
    InspectionSnapshot,
    TunnelRecord,
)
from .resource import NgrokResource

__version__ = "0.1.0"


__all__ = [
    # High-level API
    "discover_public_url",
    "wait_for_public_url",
    "NgrokResource",
    # Discovery
    "DiscoveryProbe",
    "DiscoveryResult",
    "ResultSlot",
    "ProbeConfig",
    "ProbeOutcome",
    # Inspection
    "InspectionClient",
    "InspectionSnapshot",
    "InspectionFailure",
    "FailureKind",
    "TunnelRecord",
    # Cancellation
    "CancellationToken",
    "Deadline",
    # Exceptions
    "NgrokProbeError",
    "ConfigurationError",
    "ProbeCancelledError",
    # Logging
    "get_logger",
    "setup_logging",
]
