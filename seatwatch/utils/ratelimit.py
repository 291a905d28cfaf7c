import asyncio
import time


class RateLimiter:
    """Space out request starts per limiter key (one key per proxy)."""

    def __init__(self, interval, clock=time.monotonic, sleep=asyncio.sleep):
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._locks = {}
        self._last = {}

    async def wait(self, key):
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            last = self._last.get(key)
            if last is not None:
                remaining = self.interval - (self._clock() - last)
                if remaining > 0:
                    await self._sleep(remaining)
            self._last[key] = self._clock()
