"""ngrok resource: one tunnel agent and the public URL it publishes."""

from types import TracebackType
from typing import Any, Literal

import httpx

from .common.context import CancellationToken
from .common.exceptions import ConfigurationError
from .common.logging import get_logger
from .common.utils import validate_non_empty_string, validate_port
from .discovery import DiscoveryProbe, DiscoveryResult, LogSink, ProbeConfig, ResultSlot

logger = get_logger(__name__)

DEFAULT_HOST_PORT = 4041


class NgrokResource:
    """A tunneling agent whose public URL is discovered in the background.

    ``public_url`` can be awaited from the moment the resource exists; it is
    resolved by the probe started with :meth:`start_discovery`.
    """

    def __init__(
        self,
        name: str,
        host: str = "localhost",
        port: int = DEFAULT_HOST_PORT,
        on_log: LogSink | None = None,
    ):
        """Initialize ngrok resource.

        Args:
            name: Unique resource name
            host: Host the inspection API is reachable at
            port: Host port the inspection API is bound to
            on_log: Optional line sink for discovery progress
        """
        self.name = validate_non_empty_string(name, "Resource name")
        self.host = validate_non_empty_string(host, "Host")
        validate_port(port, "Inspection port")
        self.port = port
        self._on_log = on_log
        self._slot = ResultSlot()
        self._probe: DiscoveryProbe | None = None

    @property
    def public_url(self) -> DiscoveryResult:
        """Single-assignment handle resolved with the discovered public URL."""
        return self._slot.result

    @property
    def generated_public_url(self) -> str | None:
        """Last public URL seen for this resource, None until one is found."""
        return self._slot.result.last_known_url

    @property
    def probe(self) -> DiscoveryProbe | None:
        return self._probe

    def probe_config(self, **overrides: Any) -> ProbeConfig:
        """Probe configuration for this resource's inspection endpoint."""
        config = ProbeConfig(candidate_hosts=(self.host,), port=self.port)
        return config.with_overrides(**overrides) if overrides else config

    def start_discovery(
        self,
        cancel_token: CancellationToken | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **config_overrides: Any,
    ) -> DiscoveryResult:
        """Start polling the inspection API in the background.

        Must be called from a running event loop.

        Args:
            cancel_token: Cancellation signal tied to the host's lifecycle
            transport: HTTP transport override, mainly for tests
            **config_overrides: ProbeConfig fields to override

        Returns:
            The resource's public URL handle

        Raises:
            ConfigurationError: If discovery was already started
        """
        if self._probe is not None:
            raise ConfigurationError(f"Discovery already started for {self.name}")

        config = self.probe_config(**config_overrides)
        self._probe = DiscoveryProbe(
            config,
            on_log=self._on_log,
            cancel_token=cancel_token,
            transport=transport,
            slot=self._slot,
        )
        logger.info(
            "Starting public URL discovery",
            resource=self.name,
            hosts=list(config.candidate_hosts),
            port=config.port,
        )
        return self._probe.start()

    async def stop_discovery(self) -> None:
        """Cancel the background probe, if any, and wait for it to finish."""
        if self._probe is None:
            return
        self._probe.cancel(f"resource {self.name} stopped")
        await self._probe.join()
        logger.debug("Discovery stopped", resource=self.name, outcome=self._probe.outcome.value)

    async def __aenter__(self) -> "NgrokResource":
        logger.debug("Entering NgrokResource context", resource=self.name)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        """Context manager exit - stop discovery."""
        logger.debug("Exiting NgrokResource context", resource=self.name)
        try:
            await self.stop_discovery()
        except Exception as e:
            logger.error("Error during context exit", error=str(e))
        return False

    def __repr__(self) -> str:
        return f"<NgrokResource {self.name} {self.host}:{self.port} {self.public_url!r}>"
