"""
Redis caching for list endpoints
Serves repeated list/search requests without hitting the database; mutations
invalidate the affected resources. Disabled (pass-through) when REDIS_URL is unset.
"""
import asyncio
import json
import logging
from typing import Any, Optional

import redis

from . import config

logger = logging.getLogger(__name__)

# TTL per resource in seconds
CACHE_TTLS = {
    "lich-kham": 2 * 60,
    "ho-so-thu": 5 * 60,
    "khach-hang": 5 * 60,
    "xa": 30 * 60,
}
DEFAULT_TTL = 5 * 60

# Resources whose cached lists embed data from the key resource
DEPENDENT_RESOURCES = {
    "xa": ("xa", "khach-hang"),
    "khach-hang": ("khach-hang", "xa", "ho-so-thu", "lich-kham"),
    "ho-so-thu": ("ho-so-thu", "khach-hang", "lich-kham"),
    "lich-kham": ("lich-kham", "ho-so-thu", "khach-hang"),
}


def get_redis_client() -> redis.Redis:
    """Create a Redis client from REDIS_URL and test the connection"""
    if not config.REDIS_URL:
        raise RuntimeError("REDIS_URL is not configured")

    # Mask password in URL for logging
    if "@" in config.REDIS_URL:
        url_parts = config.REDIS_URL.split("@")
        protocol = url_parts[0].split(":")[0]
        masked_url = f"{protocol}:****@{url_parts[1]}"
    else:
        masked_url = config.REDIS_URL
    logger.info(f"📡 Connecting to Redis: {masked_url}")

    client = redis.from_url(
        config.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
        max_connections=20,
    )
    client.ping()
    logger.info("Redis connected successfully")
    return client


class Cache:
    """Redis cache wrapper with automatic serialization and hit/miss counters"""

    def __init__(self):
        self.redis_client = None
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.invalidations = 0

    def _get_client(self):
        """Lazy load Redis client"""
        if self.redis_client is None:
            if not config.REDIS_URL:
                return None
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    @property
    def enabled(self) -> bool:
        return self._get_client() is not None

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                self.hits += 1
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            self.misses += 1
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> bool:
        """Set value in cache with TTL"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            self.sets += 1
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g., 'xa:*')"""
        client = self._get_client()
        if not client:
            return 0

        try:
            keys = client.keys(pattern)
            if keys:
                deleted = client.delete(*keys)
                self.invalidations += deleted
                logger.debug(f"✅ Cache DELETE pattern: {pattern} ({deleted} keys)")
                return deleted
            return 0
        except Exception as e:
            logger.error(f"❌ Cache delete pattern error for {pattern}: {e}")
            return 0

    def reset_stats(self) -> None:
        self.hits = self.misses = self.sets = self.invalidations = 0


# Global cache instance
cache = Cache()


def build_list_key(resource: str, params: dict) -> str:
    """Cache key from the resource name and its query parameters, sorted for stability"""
    query = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return f"{resource}:list?{query}"


def ttl_for(resource: str) -> int:
    return CACHE_TTLS.get(resource, DEFAULT_TTL)


def invalidate(resource: str) -> int:
    """Invalidate cached lists of a resource and of the resources that embed it"""
    deleted = 0
    for name in DEPENDENT_RESOURCES.get(resource, (resource,)):
        deleted += cache.delete_pattern(f"{name}:*")
    return deleted


def clear_all() -> int:
    return sum(cache.delete_pattern(f"{name}:*") for name in CACHE_TTLS)


def get_cache_stats() -> dict:
    """Get cache statistics"""
    lookups = cache.hits + cache.misses
    stats = {
        "available": False,
        "hits": cache.hits,
        "misses": cache.misses,
        "sets": cache.sets,
        "invalidations": cache.invalidations,
        "hit_rate": round(cache.hits / max(lookups, 1) * 100, 2),
    }

    client = cache._get_client()
    if not client:
        return stats

    stats["available"] = True
    try:
        stats["keys"] = {name: len(client.keys(f"{name}:*")) for name in CACHE_TTLS}
        info = client.info()
        stats["used_memory"] = info.get("used_memory_human")
        stats["connected_clients"] = info.get("connected_clients")
    except Exception as e:
        logger.error(f"❌ Failed to get cache stats: {e}")
        stats["error"] = "stats unavailable"
    return stats


async def log_cache_stats_periodically(interval: int) -> None:
    """Development helper: log aggregate cache statistics every ``interval`` seconds"""
    while True:
        await asyncio.sleep(interval)
        stats = get_cache_stats()
        logger.info(
            f"📊 Cache stats: available={stats['available']} hits={stats['hits']} "
            f"misses={stats['misses']} hit_rate={stats['hit_rate']}%"
        )
