"""
Market data cache with single-flight fetch de-duplication.

The cache is an explicit component owned by the market-data collaborator;
the analysis engine never touches it. Entries are keyed by
(provider, symbol, quote) and expire after a TTL. Concurrent requests for
the same key share one in-flight fetch. When a fetch fails, a recently
expired entry may be served with stale-cache diagnostics attached.
Entries older than the stale window are pruned on access.
"""

import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

import structlog

from .models import MarketData

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Identity of one cached market data series."""
    provider: str
    symbol: str
    quote: str

    @classmethod
    def of(cls, provider: str, symbol: str, quote: str) -> "CacheKey":
        """Build a key with case-normalized components."""
        return cls(provider=provider.lower(), symbol=symbol.upper(), quote=quote.lower())


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with the clock reading at which it was stored."""
    value: MarketData
    stored_at: float


class _InFlight:
    """Shared state for one in-progress fetch."""

    def __init__(self):
        self.done = threading.Event()
        self.value: Optional[MarketData] = None
        self.error: Optional[BaseException] = None


class MarketDataCache:
    """Thread-safe TTL cache with single-flight de-duplication."""

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        max_stale_seconds: float = 720.0,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.max_stale_seconds = max_stale_seconds
        self.clock = clock
        self.logger = logger

        self._entries: dict[CacheKey, CacheEntry] = {}
        self._inflight: dict[CacheKey, _InFlight] = {}
        self._lock = threading.Lock()

    def get_or_fetch(
        self,
        key: CacheKey,
        fetch: Callable[[], MarketData],
        ttl_seconds: Optional[float] = None
    ) -> MarketData:
        """
        Return a cached series or fetch it, sharing in-flight fetches.

        Args:
            key: Cache identity
            fetch: Zero-argument callable performing the remote fetch
            ttl_seconds: Optional per-call TTL override

        Returns:
            Fresh, cached or stale-fallback market data

        Raises:
            Whatever ``fetch`` raises when no usable stale entry exists
        """
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds

        with self._lock:
            now = self.clock()
            self._prune(now, max(self.max_stale_seconds, self.ttl_seconds, ttl))
            entry = self._entries.get(key)
            if entry is not None and now - entry.stored_at < ttl:
                return entry.value

            flight = self._inflight.get(key)
            leader = flight is None
            if leader:
                flight = _InFlight()
                self._inflight[key] = flight

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        started_at = self.clock()
        try:
            value = fetch()
        except Exception as e:
            fallback = self._stale_fallback(key, entry, started_at, e)
            if fallback is None:
                flight.error = e
                raise
            flight.value = fallback
            return fallback
        else:
            with self._lock:
                self._entries[key] = CacheEntry(value=value, stored_at=self.clock())
            flight.value = value
            return value
        finally:
            with self._lock:
                self._inflight.pop(key, None)
            flight.done.set()

    def _prune(self, now: float, horizon: float) -> None:
        """Drop entries too old to be served fresh or as a stale fallback. Caller holds the lock."""
        expired = [key for key, entry in self._entries.items() if now - entry.stored_at > horizon]
        for key in expired:
            del self._entries[key]

    def _stale_fallback(
        self,
        key: CacheKey,
        entry: Optional[CacheEntry],
        now: float,
        error: Exception
    ) -> Optional[MarketData]:
        if entry is None:
            return None

        age = now - entry.stored_at
        if age > self.max_stale_seconds:
            return None

        self.logger.warning(
            "Serving stale market data after fetch failure",
            provider=key.provider,
            symbol=key.symbol,
            quote=key.quote,
            cache_age_sec=round(age),
            error=str(error)
        )

        diagnostics = {
            **entry.value.diagnostics,
            "stale_cache_used": True,
            "cache_age_sec": round(age),
            "cache_fallback_reason": str(error) or type(error).__name__,
        }
        return replace(entry.value, diagnostics=diagnostics)

    def invalidate(self, key: CacheKey) -> None:
        """Drop one cached entry."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
