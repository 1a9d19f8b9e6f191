"""Cache service for provider calls with stale fallback and request throttling.

Each cache is an instance owned by the provider wrapper it serves:
- Fresh cache: entries younger than the fresh TTL are served without a call
- Stale cache: longer-lived copy served only when the upstream call fails
- Throttle: enforces a minimum interval between upstream calls, either by
  waiting for the next slot (history) or by refusing the call (news)
"""
import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from cachetools import TTLCache

from crypto_sensei.core.config import Settings
from crypto_sensei.core.exceptions import RateLimitedError
from crypto_sensei.providers.base import MarketDataProviderInterface, NewsProviderInterface
from crypto_sensei.schemas.market import HistoricalSeries, NewsHeadline

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheHitType(str, Enum):
    """Where a cached value came from (for logging)."""
    FRESH_HIT = "fresh_hit"  # Served from the fresh cache
    STALE_HIT = "stale_hit"  # Upstream failed or throttled, served from the stale cache
    MISS = "miss"            # Fetched from upstream


@dataclass
class CacheTTLConfig:
    """TTL configuration for a provider cache."""
    fresh_ttl: int = 1800        # 30 minutes
    stale_ttl: int = 86400       # 24 hours
    max_size: int = 200          # Max keys per cache
    min_interval: float = 6.0    # Seconds between upstream calls
    wait_for_slot: bool = True   # False: refuse throttled calls instead of sleeping

    @classmethod
    def for_history(cls, settings: Settings) -> "CacheTTLConfig":
        return cls(
            fresh_ttl=settings.history_cache_ttl,
            stale_ttl=settings.stale_cache_ttl,
            max_size=settings.cache_size,
            min_interval=settings.market_data_min_interval,
        )

    @classmethod
    def for_news(cls, settings: Settings) -> "CacheTTLConfig":
        return cls(
            fresh_ttl=settings.news_cache_ttl,
            stale_ttl=settings.stale_cache_ttl,
            max_size=settings.cache_size,
            min_interval=settings.news_min_interval,
            wait_for_slot=False,
        )


class RequestThrottle:
    """
    Minimum-interval throttle for upstream calls.

    Callers either wait until at least `min_interval` seconds have passed
    since the previous call started (`wait`, serialized by an asyncio lock)
    or claim the slot only when it is already free (`try_acquire`).
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: float | None = None

    def remaining(self) -> float:
        """Seconds until the next call is allowed (0 if allowed now)."""
        if self._last_call is None:
            return 0.0
        return max(0.0, self.min_interval - (self._clock() - self._last_call))

    async def wait(self) -> None:
        """Wait for the next slot and claim it."""
        async with self._lock:
            delay = self.remaining()
            if delay > 0:
                logger.debug(f"Throttling upstream call for {delay:.2f}s")
                await self._sleep(delay)
            self._last_call = self._clock()

    def try_acquire(self) -> bool:
        """Claim the slot if it is free now, without waiting."""
        if self.remaining() > 0:
            return False
        self._last_call = self._clock()
        return True


class ProviderCache:
    """
    TTL cache with stale fallback for one kind of provider call.

    Flow for get_or_fetch:
    1. Fresh hit: return without calling upstream
    2. Miss: claim a throttle slot, fetch, store in both caches
    3. Throttled (fail-fast caches only): return the stale entry if any,
       else raise RateLimitedError
    4. Fetch failure: return the stale entry if any, else re-raise
    """

    def __init__(
        self,
        ttl_config: CacheTTLConfig | None = None,
        name: str = "provider",
        throttle: RequestThrottle | None = None,
    ):
        self.ttl_config = ttl_config or CacheTTLConfig()
        self.name = name

        self.fresh: TTLCache = TTLCache(
            maxsize=self.ttl_config.max_size, ttl=self.ttl_config.fresh_ttl
        )
        self.stale: TTLCache = TTLCache(
            maxsize=self.ttl_config.max_size, ttl=self.ttl_config.stale_ttl
        )
        self.throttle = throttle or RequestThrottle(self.ttl_config.min_interval)
        # Per-key locks with their holder/waiter counts; dropped when the count reaches zero
        self._key_locks: dict[str, tuple[asyncio.Lock, int]] = {}
        self.last_hit_type: CacheHitType | None = None

        logger.info(
            f"ProviderCache '{name}' initialized: "
            f"size={self.ttl_config.max_size}, TTL={self.ttl_config.fresh_ttl}s, "
            f"stale TTL={self.ttl_config.stale_ttl}s"
        )

    async def get_or_fetch(self, key: str, fetch: Callable[[], Awaitable[T]]) -> T:
        """Return a cached value or fetch it through the throttle.

        Args:
            key: Cache key
            fetch: Zero-argument coroutine function performing the upstream call

        Returns:
            Fresh cached value, fetched value, or stale value if the fetch
            failed or was throttled

        Raises:
            RateLimitedError: Fail-fast cache throttled with no stale entry
            Exception: Whatever `fetch` raised, when no stale entry exists
        """
        if key in self.fresh:
            logger.debug(f"{self.name} cache hit: {key}")
            self.last_hit_type = CacheHitType.FRESH_HIT
            return self.fresh[key]

        # Concurrent callers for the same key share one upstream call
        async with self._key_lock(key):
            if key in self.fresh:
                self.last_hit_type = CacheHitType.FRESH_HIT
                return self.fresh[key]

            if not self.ttl_config.wait_for_slot and not self.throttle.try_acquire():
                retry_after = self.throttle.remaining()
                if key in self.stale:
                    logger.info(f"{self.name} throttled for {key}, serving stale data")
                    self.last_hit_type = CacheHitType.STALE_HIT
                    return self.stale[key]
                logger.warning(f"{self.name} throttled for {key}, retry after {retry_after:.1f}s")
                raise RateLimitedError(
                    f"{self.name} request for {key} throttled", retry_after=retry_after
                )

            try:
                if self.ttl_config.wait_for_slot:
                    await self.throttle.wait()
                value = await fetch()
            except Exception as e:
                if key in self.stale:
                    logger.warning(f"{self.name} fetch failed for {key}, serving stale data: {e}")
                    self.last_hit_type = CacheHitType.STALE_HIT
                    return self.stale[key]
                raise

            self.fresh[key] = value
            self.stale[key] = value
            self.last_hit_type = CacheHitType.MISS
            return value

    @asynccontextmanager
    async def _key_lock(self, key: str) -> AsyncIterator[None]:
        lock, users = self._key_locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._key_locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._key_locks[key]
            if users == 1:
                del self._key_locks[key]
            else:
                self._key_locks[key] = (lock, users - 1)

    def invalidate(self, key: str) -> None:
        """Drop a key from both caches."""
        self.fresh.pop(key, None)
        self.stale.pop(key, None)

    def clear(self) -> None:
        self.fresh.clear()
        self.stale.clear()


class CachingMarketDataProvider(MarketDataProviderInterface):
    """Market data provider wrapper with its own ProviderCache."""

    def __init__(self, provider: MarketDataProviderInterface, cache: ProviderCache | None = None):
        self.provider = provider
        self.cache = cache or ProviderCache(name=f"history:{provider.provider_name}")

    @property
    def provider_name(self) -> str:
        return self.provider.provider_name

    async def fetch_history(self, symbol: str, days: int) -> HistoricalSeries:
        return await self.cache.get_or_fetch(
            f"history:{symbol.lower()}:{days}",
            lambda: self.provider.fetch_history(symbol, days),
        )


class CachingNewsProvider(NewsProviderInterface):
    """News provider wrapper with its own ProviderCache."""

    def __init__(self, provider: NewsProviderInterface, cache: ProviderCache | None = None):
        self.provider = provider
        self.cache = cache or ProviderCache(name=f"news:{provider.provider_name}")

    @property
    def provider_name(self) -> str:
        return self.provider.provider_name

    async def fetch_headlines(self, symbol: str, limit: int) -> list[NewsHeadline]:
        return await self.cache.get_or_fetch(
            f"news:{symbol.lower()}:{limit}",
            lambda: self.provider.fetch_headlines(symbol, limit),
        )
