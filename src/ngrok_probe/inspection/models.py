"""Inspection models.

This module defines the records parsed out of an inspection endpoint response
and the closed set of classified failures the inspection client can return.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.utils import is_secure_url


class FailureKind(str, Enum):
    """Classified inspection failure kinds."""

    UNREACHABLE = "unreachable"  # transport-level failure
    UNAVAILABLE = "unavailable"  # non-2xx status
    MALFORMED = "malformed"  # 2xx with a body that is not JSON


class TunnelRecord(BaseModel):
    """One tunnel reported by the inspection endpoint."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    public_url: str = Field(min_length=1, description="Public URL of the tunnel")

    @field_validator("public_url")
    @classmethod
    def validate_absolute_url(cls, v: str) -> str:
        """Public URLs must carry a scheme."""
        if "://" not in v:
            raise ValueError("public_url must be an absolute URL")
        return v

    @property
    def is_secure(self) -> bool:
        return is_secure_url(self.public_url)


class InspectionSnapshot(BaseModel):
    """Successful answer from one inspection endpoint."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Inspection URL that answered")
    status_code: int = Field(ge=200, le=299)
    tunnels: tuple[TunnelRecord, ...] = Field(default_factory=tuple)
    body: str = Field(default="", description="Raw response text")
    has_tunnel_list: bool = Field(
        default=False, description="Whether the body carried a 'tunnels' array"
    )

    @property
    def is_empty(self) -> bool:
        return not self.body.strip()

    @property
    def public_urls(self) -> list[str]:
        return [tunnel.public_url for tunnel in self.tunnels]


class InspectionFailure(BaseModel):
    """Classified failure of a single inspection request."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    url: str
    status_code: int | None = None
    detail: str = ""

    def describe(self) -> str:
        """Human readable one-line summary for log output."""
        if self.kind == FailureKind.UNAVAILABLE:
            return f"inspection API returned status {self.status_code} from {self.url}"
        if self.kind == FailureKind.MALFORMED:
            return f"failed to parse inspection response from {self.url} as JSON: {self.detail}"
        return f"request to {self.url} failed: {self.detail}"


InspectionOutcome = InspectionSnapshot | InspectionFailure
