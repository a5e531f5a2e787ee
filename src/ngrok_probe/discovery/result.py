"""Single-assignment result of a discovery probe run.

A :class:`ResultSlot` is owned by exactly one probe run and is the only way to
write a result. Everyone else gets the read-only :class:`DiscoveryResult`
handle from :attr:`ResultSlot.result`, which can be polled, awaited or given
callbacks before or after resolution.
"""

import asyncio
from collections.abc import Callable

from ..common.logging import get_logger

logger = get_logger(__name__)

ResultCallback = Callable[[str], None]


class DiscoveryResult:
    """Read-only view of a probe run's outcome."""

    def __init__(self, slot: "ResultSlot") -> None:
        self._slot = slot

    def done(self) -> bool:
        return self._slot._url is not None

    @property
    def url(self) -> str | None:
        """Resolved URL, or None while unset."""
        return self._slot._url

    @property
    def last_known_url(self) -> str | None:
        """Most recent URL seen by the probe. May lag or differ from ``url``."""
        return self._slot._last_known_url

    async def wait(self, timeout: float | None = None) -> str | None:
        """Wait for resolution.

        Args:
            timeout: Seconds to wait; None waits until resolved

        Returns:
            The resolved URL, or None if nothing was resolved within ``timeout``
        """
        if self.done():
            return self.url
        try:
            await asyncio.wait_for(self._slot._resolved.wait(), timeout=timeout)
        except TimeoutError:
            return None
        return self.url

    def add_done_callback(self, callback: ResultCallback) -> None:
        """Call ``callback(url)`` on resolution, or right away if already resolved."""
        if self.done():
            self._slot._notify(callback, self._slot._url)  # type: ignore[arg-type]
            return
        self._slot._callbacks.append(callback)

    def __repr__(self) -> str:
        state = f"resolved url={self.url!r}" if self.done() else "unset"
        return f"<DiscoveryResult {state}>"


class ResultSlot:
    """Writable side of a single-assignment discovery result."""

    def __init__(self) -> None:
        self._url: str | None = None
        self._last_known_url: str | None = None
        self._resolved = asyncio.Event()
        self._callbacks: list[ResultCallback] = []
        self.result = DiscoveryResult(self)

    @property
    def resolved(self) -> bool:
        return self._url is not None

    def record(self, url: str) -> None:
        """Remember ``url`` as the latest one seen, without resolving."""
        self._last_known_url = url

    def try_resolve(self, url: str) -> bool:
        """Resolve the slot with ``url`` unless it is already resolved.

        Returns:
            True if this call resolved the slot, False if it was already set
        """
        if self._url is not None:
            return False

        self._url = url
        self._resolved.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            self._notify(callback, url)
        return True

    @staticmethod
    def _notify(callback: ResultCallback, url: str) -> None:
        try:
            callback(url)
        except Exception as e:
            logger.error("Discovery result callback failed", error=str(e))
