import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .exceptions import ProbeCancelledError

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation signal shared by everything in one probe run.

    Every suspension point of a run goes through :meth:`sleep` or :meth:`guard`,
    so firing the token interrupts an in-flight wait or request instead of
    being noticed only between attempts.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Calling it again keeps the first reason."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ProbeCancelledError(self._reason or "cancellation requested")

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds unless cancelled first.

        Raises:
            ProbeCancelledError: If the token fires before or during the sleep
        """
        self.raise_if_cancelled()
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except TimeoutError:
            return
        self.raise_if_cancelled()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` but give up as soon as the token fires.

        The pending work is cancelled and awaited before returning, so no
        request outlives the guard.

        Raises:
            ProbeCancelledError: If the token fires before the work completes
        """
        work = asyncio.ensure_future(awaitable)
        if self.cancelled:
            work.cancel()
            await asyncio.gather(work, return_exceptions=True)
            self.raise_if_cancelled()

        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()
                await asyncio.gather(work, return_exceptions=True)

        if work in done:
            return work.result()
        raise ProbeCancelledError(self._reason or "cancellation requested")


class Deadline:
    """Absolute point in time on a monotonic clock."""

    def __init__(self, at: float, clock: Callable[[], float] = time.monotonic):
        self.at = at
        self._clock = clock

    @classmethod
    def after(
        cls, seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> "Deadline":
        """Deadline ``seconds`` from now."""
        return cls(clock() + seconds, clock)

    def remaining(self) -> float:
        return max(0.0, self.at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self.at

    def clamp(self, delay: float) -> float:
        """Shorten ``delay`` so that it never runs past the deadline."""
        return min(delay, self.remaining())
