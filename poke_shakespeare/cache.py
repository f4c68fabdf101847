"""Response caches for finished Shakespearean descriptions.

Both backends key entries by normalized Pokemon name and only ever receive
successful results; failures are never written. A miss is always safe, since
the caller simply falls through to the upstream APIs.
"""
import asyncio
import logging
import time
from collections import OrderedDict
from typing import Callable, Protocol

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from poke_shakespeare.models import CacheEntry, normalize_name

logger = logging.getLogger(__name__)


class ResponseCache(Protocol):
    async def get(self, name: str) -> CacheEntry | None:
        ...

    async def put(self, name: str, description: str) -> CacheEntry:
        ...

    async def clear(self) -> None:
        ...

    async def close(self) -> None:
        ...


class InMemoryResponseCache:
    """Process-local cache with TTL expiry and oldest-first eviction."""

    def __init__(
        self,
        ttl: float | None = 3600,
        capacity: int = 4096,
        clock: Callable[[], float] = time.time,
    ):
        if capacity <= 0:
            raise ValueError(f"Invalid cache capacity {capacity}")
        if ttl is not None and ttl <= 0:
            raise ValueError(f"Invalid cache TTL {ttl}")
        self.ttl = ttl
        self.capacity = capacity
        self._clock = clock
        # Insertion order is creation order: the first item is the oldest
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self.ttl is not None and self._clock() - entry.created_at >= self.ttl

    async def get(self, name: str) -> CacheEntry | None:
        key = normalize_name(name)
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry):
                logger.info(f"Cache entry expired for Pokemon: {key}")
                del self._entries[key]
                return None
            return entry

    async def put(self, name: str, description: str) -> CacheEntry:
        key = normalize_name(name)
        entry = CacheEntry(name=key, description=description, created_at=self._clock())
        async with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.info(f"Cache full, evicted Pokemon: {evicted}")
        return entry

    async def clear(self):
        async with self._lock:
            self._entries.clear()

    async def close(self):
        pass


class RedisResponseCache:
    """Short-lived shared cache in Redis; expiry is delegated to SETEX."""

    KEY_PREFIX = "pokespeare:description:"

    def __init__(self, redis_url: str = "redis://localhost:6379", ttl: float | None = 3600):
        if ttl is not None and ttl <= 0:
            raise ValueError(f"Invalid cache TTL {ttl}")
        self.ttl = ttl
        self.redis = aioredis.from_url(redis_url, decode_responses=True)

    def _key(self, name: str) -> str:
        return f"{self.KEY_PREFIX}{normalize_name(name)}"

    async def get(self, name: str) -> CacheEntry | None:
        try:
            cached = await self.redis.get(self._key(name))
        except RedisError as e:
            logger.warning(f"Redis read failed, treating as cache miss: {e}")
            return None
        if cached is None:
            return None
        try:
            return CacheEntry.model_validate_json(cached)
        except ValidationError:
            logger.warning(f"Unreadable cache entry for Pokemon {normalize_name(name)}, treating as cache miss")
            return None

    async def put(self, name: str, description: str) -> CacheEntry:
        entry = CacheEntry(name=normalize_name(name), description=description, created_at=time.time())
        try:
            if self.ttl is None:
                await self.redis.set(self._key(name), entry.model_dump_json())
            else:
                # SETEX only takes whole seconds
                await self.redis.setex(self._key(name), max(1, int(self.ttl)), entry.model_dump_json())
        except RedisError as e:
            logger.warning(f"Redis write failed, result not cached: {e}")
        return entry

    async def clear(self):
        """Clear the description cache. Useful for testing."""
        keys = await self.redis.keys(f"{self.KEY_PREFIX}*")
        if keys:
            await self.redis.delete(*keys)

    async def close(self):
        """Close Redis connection (call on app shutdown)."""
        await self.redis.aclose()
