"""High-level API for the ngrok probe.

This module provides simple functions for the common case of finding the
public URL of a single local tunneling agent.
"""

from collections.abc import Sequence
from typing import Any

import httpx

from .common.context import CancellationToken
from .common.logging import get_logger
from .discovery import DiscoveryProbe, DiscoveryResult, LogSink, ProbeConfig

logger = get_logger(__name__)


def discover_public_url(
    host: str | Sequence[str] = "localhost",
    port: int = 4040,
    *,
    cancel_token: CancellationToken,
    on_log: LogSink | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> DiscoveryResult:
    """Start a background probe and return its result handle right away.

    Must be called from a running event loop. The run is stopped through
    `cancel_token`; it ends on its own only once it resolves or its deadline
    passes.

    Args:
        host: Inspection host, or several candidate hosts in priority order
        port: Inspection endpoint port
        cancel_token: Cancellation signal for the run
        on_log: Optional line sink for progress messages
        transport: HTTP transport override, mainly for tests
        **kwargs: Additional ProbeConfig options (poll_interval, initial_delay, ...)

    Returns:
        DiscoveryResult: Awaitable handle on the public URL

    Example:
        >>> token = CancellationToken()
        >>> result = discover_public_url("localhost", 4040, cancel_token=token)
        >>> url = await result.wait(timeout=90)
        >>> token.cancel("shutting down")
    """
    hosts = (host,) if isinstance(host, str) else tuple(host)
    config = ProbeConfig(candidate_hosts=hosts, port=port, **kwargs)
    probe = DiscoveryProbe(
        config, on_log=on_log, cancel_token=cancel_token, transport=transport
    )
    logger.debug("Starting discovery probe", hosts=list(hosts), port=port)
    return probe.start()


async def wait_for_public_url(
    host: str | Sequence[str] = "localhost",
    port: int = 4040,
    *,
    on_log: LogSink | None = None,
    cancel_token: CancellationToken | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> str | None:
    """Run a probe to completion and return the public URL.

    Returns:
        The public URL, or None if the deadline passed or the run was cancelled
    """
    hosts = (host,) if isinstance(host, str) else tuple(host)
    config = ProbeConfig(candidate_hosts=hosts, port=port, **kwargs)
    probe = DiscoveryProbe(
        config, on_log=on_log, cancel_token=cancel_token, transport=transport
    )
    result = await probe.run()
    return result.url
