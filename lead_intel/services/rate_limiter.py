"""
Rate limiter - spaces out calls to shared, rate-limited providers.

Each component gets its own limiter. The first wait() releases immediately;
later ones sleep until `interval` seconds have passed since the last release.
An interval of 0 never sleeps, which is what tests use.
"""

import asyncio
import time


class RateLimiter:
    def __init__(self, interval: float = 0.0, name: str = "limiter"):
        self.interval = max(0.0, float(interval or 0.0))
        self.name = name
        self._last_release = None
        self._lock = None

    async def wait(self) -> float:
        """Block until the next call is allowed. Returns seconds slept."""
        # Created on first use so it binds to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            slept = 0.0
            now = time.monotonic()
            if self._last_release is not None and self.interval > 0:
                remaining = self.interval - (now - self._last_release)
                if remaining > 0:
                    await asyncio.sleep(remaining)
                    slept = remaining
            self._last_release = time.monotonic()
            return slept

    def reset(self) -> None:
        self._last_release = None
