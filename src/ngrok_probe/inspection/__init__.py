"""Inspection endpoint client and models."""

from .client import InspectionClient, extract_tunnels
from .models import (
    FailureKind,
    InspectionFailure,
    InspectionOutcome,
    InspectionSnapshot,
    TunnelRecord,
)

__all__ = [
    "InspectionClient",
    "extract_tunnels",
    "FailureKind",
    "InspectionFailure",
    "InspectionOutcome",
    "InspectionSnapshot",
    "TunnelRecord",
]
