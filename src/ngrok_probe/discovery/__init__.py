"""Discovery probe, its configuration and its single-assignment result."""

from .config import DEFAULT_INSPECTION_PORT, ProbeConfig
from .probe import DiscoveryProbe, LogSink, ProbeOutcome
from .result import DiscoveryResult, ResultSlot

__all__ = [
    "DEFAULT_INSPECTION_PORT",
    "ProbeConfig",
    "DiscoveryProbe",
    "LogSink",
    "ProbeOutcome",
    "DiscoveryResult",
    "ResultSlot",
]
