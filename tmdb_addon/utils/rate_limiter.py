"""
Rate Limiter Utility
Token bucket shared by every client talking to the same upstream
"""
import asyncio
import time
from typing import Dict

from tmdb_addon.core.config import settings


class RateLimiter:
    """Token bucket rate limiter with shared state per upstream service"""

    _instances: Dict[str, "RateLimiter"] = {}

    def __init__(self, service_name: str, rate: int):
        self.service_name = service_name
        self.rate = rate  # requests per second, 0 disables limiting
        self.tokens = float(rate)
        self.last_update = time.monotonic()
        self.lock = asyncio.Lock()

    @classmethod
    def for_service(cls, service_name: str, rate: int) -> "RateLimiter":
        """Shared limiter for an upstream; the first caller fixes the rate"""
        limiter = cls._instances.get(service_name)
        if limiter is None:
            limiter = cls(service_name, rate)
            cls._instances[service_name] = limiter
        return limiter

    @property
    def disabled(self) -> bool:
        return self.rate <= 0 or settings.DISABLE_RATE_LIMITING

    async def acquire(self):
        """Take a token, sleeping until one is available"""
        if self.disabled:
            return
        async with self.lock:
            now = time.monotonic()
            self.tokens = min(self.rate, self.tokens + (now - self.last_update) * self.rate)
            self.last_update = now

            if self.tokens < 1:
                await asyncio.sleep((1 - self.tokens) / self.rate)
                self.tokens = 1
                self.last_update = time.monotonic()
            self.tokens -= 1
