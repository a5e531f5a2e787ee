"""Discovery probe: polls an inspection endpoint until a public URL shows up.

The probe is advisory. Every failure it meets is logged and absorbed, and a run
ends in one of two observable ways: the result is resolved with a URL, or it
stays unset because the deadline passed or the run was cancelled.
"""

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx

from ..common.context import CancellationToken, Deadline
from ..common.exceptions import ConfigurationError, ProbeCancelledError
from ..common.logging import get_logger
from ..inspection import InspectionClient, InspectionFailure, InspectionSnapshot
from .config import ProbeConfig
from .result import DiscoveryResult, ResultSlot

logger = get_logger(__name__)

LogSink = Callable[[str], None]


class ProbeOutcome(str, Enum):
    """Terminal (or current) state of a probe run."""

    PENDING = "pending"
    RUNNING = "running"
    RESOLVED = "resolved"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CANCELLED = "cancelled"
    FAILED = "failed"


class DiscoveryProbe:
    """Background poller that publishes a tunnel's public URL once."""

    def __init__(
        self,
        config: ProbeConfig,
        on_log: LogSink | None = None,
        cancel_token: CancellationToken | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        name: str = "ngrok",
        slot: ResultSlot | None = None,
    ):
        """Initialize discovery probe.

        Args:
            config: Probe configuration, owned by this run
            on_log: Optional sink receiving one text line per log event
            cancel_token: Cancellation signal for the run (a new one if None)
            transport: HTTP transport override, mainly for tests
            name: Prefix used for lines sent to ``on_log``
            slot: Result slot to write to, when the caller already handed out its result
        """
        self.config = config
        self.name = name
        self.cancel_token = cancel_token or CancellationToken()
        self.outcome = ProbeOutcome.PENDING
        self.attempts = 0
        self._on_log = on_log
        self._transport = transport
        self._slot = slot or ResultSlot()
        self._task: asyncio.Task[DiscoveryResult] | None = None
        self._logger = logger.bind(probe=name, port=config.port)

    @property
    def result(self) -> DiscoveryResult:
        return self._slot.result

    @property
    def task(self) -> "asyncio.Task[DiscoveryResult] | None":
        return self._task

    def start(self) -> DiscoveryResult:
        """Schedule :meth:`run` as a background task and return its result handle.

        Raises:
            ConfigurationError: If this probe was already started
        """
        if self._task is not None or self.outcome != ProbeOutcome.PENDING:
            raise ConfigurationError(f"Probe {self.name} was already started")
        self._task = asyncio.get_running_loop().create_task(
            self.run(), name=f"{self.name}-discovery-probe"
        )
        return self.result

    def cancel(self, reason: str = "cancelled by caller") -> None:
        """Ask the run to stop at its next suspension point."""
        self.cancel_token.cancel(reason)

    async def join(self) -> None:
        """Wait for the background task started by :meth:`start` to finish."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def run(self) -> DiscoveryResult:
        """Poll until resolved, past the deadline, or cancelled.

        Never raises for probe failures. Cancelling the surrounding asyncio task
        still propagates CancelledError, with the HTTP client closed first.

        Returns:
            The run's DiscoveryResult, resolved or not
        """
        if self.outcome != ProbeOutcome.PENDING:
            raise ConfigurationError(f"Probe {self.name} was already started")
        self.outcome = ProbeOutcome.RUNNING

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.config.request_timeout
            ) as http:
                client = InspectionClient(http, self.config.request_timeout)
                self.outcome = await self._poll(client)
        except ProbeCancelledError as e:
            self.outcome = ProbeOutcome.CANCELLED
            self._log("discovery cancelled", reason=str(e))
        except asyncio.CancelledError:
            self.outcome = ProbeOutcome.CANCELLED
            raise
        except Exception as e:
            self.outcome = ProbeOutcome.FAILED
            self._log(f"discovery stopped after an unexpected error: {e}", level="error", error=str(e))

        return self.result

    async def _poll(self, client: InspectionClient) -> ProbeOutcome:
        token = self.cancel_token
        await token.sleep(self.config.initial_delay)

        deadline = self._deadline()
        urls = self.config.inspection_urls()

        while not deadline.expired:
            token.raise_if_cancelled()
            self.attempts += 1
            try:
                snapshot = await self._query(client, urls, deadline)
                if snapshot is not None:
                    self._scan(snapshot)
            except ProbeCancelledError:
                raise
            except Exception as e:
                self._log(f"inspection query error: {e}", level="error", error=str(e))

            if self._slot.resolved:
                return ProbeOutcome.RESOLVED
            await token.sleep(deadline.clamp(self.config.poll_interval))

        self._log(
            "no public URL discovered before the deadline",
            level="warning",
            attempts=self.attempts,
        )
        return ProbeOutcome.DEADLINE_EXCEEDED

    def _deadline(self) -> Deadline:
        if self.config.deadline is not None:
            return Deadline(self.config.deadline)
        return Deadline.after(self.config.poll_timeout)

    async def _query(
        self, client: InspectionClient, urls: list[str], deadline: Deadline
    ) -> InspectionSnapshot | None:
        """Try candidates in order; the first one that answers wins the attempt.

        Requests in flight when the deadline passes are abandoned, and no
        further candidate is tried.
        """
        for url in urls:
            if deadline.expired:
                break
            self._log(f"querying inspection API at {url}", url=url)
            try:
                async with asyncio.timeout(deadline.remaining()):
                    outcome = await self.cancel_token.guard(client.fetch(url))
            except TimeoutError:
                self._log(
                    f"request to {url} abandoned at the deadline",
                    level="warning",
                    url=url,
                )
                break
            if isinstance(outcome, InspectionFailure):
                self._log(
                    outcome.describe(),
                    level="warning",
                    kind=outcome.kind.value,
                    status_code=outcome.status_code,
                )
                continue
            return outcome

        self._log(
            "no successful inspection API response from any candidate hosts",
            level="warning",
        )
        return None

    def _scan(self, snapshot: InspectionSnapshot) -> None:
        if snapshot.is_empty:
            self._log("inspection API returned empty body", url=snapshot.url)
            return

        self._log(f"inspection API response: {snapshot.body}", level="debug")
        if not snapshot.has_tunnel_list:
            self._log("no 'tunnels' array found in inspection response", url=snapshot.url)
            return

        # The first https tunnel ends the scan; otherwise the first tunnel seen wins.
        chosen = None
        for tunnel in snapshot.tunnels:
            self._log(f"found tunnel public_url={tunnel.public_url}", public_url=tunnel.public_url)
            self._slot.record(tunnel.public_url)
            if tunnel.is_secure:
                chosen = tunnel
                break
            if chosen is None:
                chosen = tunnel

        if chosen is None:
            self._log("no tunnels with a public URL reported yet", url=snapshot.url)
            return

        if self._slot.try_resolve(chosen.public_url):
            self._log(f"public URL resolved: {chosen.public_url}", public_url=chosen.public_url)

    def _log(self, message: str, level: str = "info", **fields: Any) -> None:
        getattr(self._logger, level)(message, **fields)
        if self._on_log is None:
            return
        try:
            self._on_log(f"[{self.name}] {message}")
        except Exception as e:
            self._logger.error("Log sink failed", error=str(e))
