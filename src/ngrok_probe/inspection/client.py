"""Inspection client for the tunneling agent's local API."""

import json
from typing import Any

import httpx
from pydantic import ValidationError

from ..common.logging import get_logger
from .models import (
    FailureKind,
    InspectionFailure,
    InspectionOutcome,
    InspectionSnapshot,
    TunnelRecord,
)

logger = get_logger(__name__)


class InspectionClient:
    """Single-shot reader of an inspection endpoint.

    Each call to :meth:`fetch` issues exactly one GET. Retrying is left to the
    caller, and failures are returned as :class:`InspectionFailure` values
    rather than raised.
    """

    def __init__(self, http: httpx.AsyncClient, request_timeout: float = 10.0):
        """Initialize inspection client.

        Args:
            http: HTTP client owned by the caller
            request_timeout: Timeout in seconds for one request
        """
        self._http = http
        self.request_timeout = request_timeout

    async def fetch(self, url: str) -> InspectionOutcome:
        """Query one inspection URL and extract the tunnels it reports.

        Args:
            url: Full inspection URL, e.g. ``http://localhost:4040/api/tunnels``

        Returns:
            InspectionSnapshot on any 2xx answer, InspectionFailure otherwise
        """
        try:
            response = await self._http.get(url, timeout=self.request_timeout)
        except httpx.RequestError as e:
            logger.debug("Inspection request failed", url=url, error=str(e))
            return InspectionFailure(
                kind=FailureKind.UNREACHABLE,
                url=url,
                detail=str(e) or type(e).__name__,
            )

        if not response.is_success:
            return InspectionFailure(
                kind=FailureKind.UNAVAILABLE,
                url=url,
                status_code=response.status_code,
                detail=response.reason_phrase,
            )

        body = response.text
        if not body.strip():
            return InspectionSnapshot(url=url, status_code=response.status_code)

        try:
            payload = json.loads(body)
        except (ValueError, RecursionError) as e:
            return InspectionFailure(
                kind=FailureKind.MALFORMED,
                url=url,
                status_code=response.status_code,
                detail=str(e),
            )

        entries = payload.get("tunnels") if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            return InspectionSnapshot(
                url=url, status_code=response.status_code, body=body
            )

        return InspectionSnapshot(
            url=url,
            status_code=response.status_code,
            tunnels=tuple(extract_tunnels(entries)),
            body=body,
            has_tunnel_list=True,
        )


def extract_tunnels(entries: list[Any]) -> list[TunnelRecord]:
    """Build tunnel records from the raw ``tunnels`` array.

    Entries that are not objects, or whose ``public_url`` is missing, empty or
    not a string, are skipped.
    """
    tunnels = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        public_url = entry.get("public_url")
        if not isinstance(public_url, str) or not public_url:
            continue
        try:
            tunnels.append(TunnelRecord(public_url=public_url))
        except ValidationError:
            logger.debug("Skipping tunnel entry", public_url=public_url)
    return tunnels
