"""Global request pacing gate.

Every outbound request to the marketplace passes through a single
PacingGate, so requests are spaced by at least the base delay no matter
which operation issued them.
"""

import asyncio
import random
import time
from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class PacingGate:
    """Enforces a minimum randomized gap between consecutive sends.

    Before each send the gate draws ``base_delay + uniform(0, jitter)`` and
    sleeps for whatever part of it has not yet elapsed since the previous
    send. Reading the last send time and recording the new one happen under
    one lock, so concurrent callers are serialized through the gate.
    """

    def __init__(
        self,
        base_delay: float,
        jitter: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize pacing gate.

        Args:
            base_delay: Minimum seconds between two sends
            jitter: Upper bound of the random extra delay in seconds
            clock: Monotonic time source
            sleep: Coroutine used to suspend the caller
            rng: Random source for the jitter draw
        """
        if base_delay < 0 or jitter < 0:
            raise ValueError("base_delay and jitter must be non-negative")
        self.base_delay = base_delay
        self.jitter = jitter
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._last_sent: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def last_sent(self) -> Optional[float]:
        """Clock value of the most recent send, None before the first one."""
        return self._last_sent

    def draw_delay(self) -> float:
        """Draw the minimum gap required before the next send."""
        return self.base_delay + self._rng.uniform(0.0, self.jitter)

    async def wait(self) -> float:
        """Suspend until the next send is allowed and record it.

        Returns:
            Seconds spent sleeping (0.0 when no wait was needed)
        """
        async with self._lock:
            min_delay = self.draw_delay()
            waited = 0.0
            if self._last_sent is not None:
                elapsed = self._clock() - self._last_sent
                if elapsed < min_delay:
                    waited = min_delay - elapsed
                    logger.debug("pacing_wait", seconds=round(waited, 3))
                    await self._sleep(waited)
            self._last_sent = self._clock()
            return waited
