from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.utils import build_inspection_url, validate_non_empty_string

DEFAULT_INSPECTION_PORT = 4040


class ProbeConfig(BaseModel):
    """Immutable configuration for one discovery probe run"""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    candidate_hosts: tuple[str, ...] = Field(
        default=("localhost",),
        min_length=1,
        description="Hosts to try per attempt, in priority order",
    )
    port: int = Field(
        default=DEFAULT_INSPECTION_PORT, ge=1, le=65535, description="Inspection endpoint port"
    )
    poll_interval: float = Field(default=1.0, ge=0.0, description="Delay between unsuccessful attempts")
    initial_delay: float = Field(default=5.0, ge=0.0, description="Grace period before the first attempt")
    poll_timeout: float = Field(default=60.0, gt=0.0, description="Polling budget used when no deadline is given")
    deadline: float | None = Field(
        default=None, description="Absolute stop time on the time.monotonic() clock"
    )
    request_timeout: float = Field(default=10.0, gt=0.0, description="Per-request timeout in seconds")

    @field_validator("candidate_hosts")
    @classmethod
    def validate_hosts(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Strip hosts and reject blanks"""
        return tuple(validate_non_empty_string(host, "Candidate host") for host in v)

    def inspection_urls(self) -> list[str]:
        """Inspection URLs for every candidate host, in priority order"""
        return [build_inspection_url(host, self.port) for host in self.candidate_hosts]

    def with_overrides(self, **overrides: Any) -> "ProbeConfig":
        """Return a validated copy with some fields replaced"""
        return ProbeConfig.model_validate({**self.model_dump(), **overrides})
