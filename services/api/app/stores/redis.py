"""Redis store for real-time counters.

Handles:
- Event counters (INCR per tracked event type)
- Product sales counters (INCRBY purchased quantity)

Key layout:
- counter:<event_type>        -> number of tracked events of that type
- sales:product:<product_id>  -> total purchased quantity of a product
"""

import logging

import redis.asyncio as redis

from app.settings import get_settings

# Key prefixes
PREFIX_COUNTER = "counter:"
PREFIX_PRODUCT_SALES = "sales:product:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def ping_redis() -> None:
    """Ping Redis; raises if unreachable."""
    await _get_redis().ping()


# ============================================================
# Generic key operations
# ============================================================


async def get_value(key: str) -> str | None:
    """Get raw value for a key.

    Args:
        key: Redis key.

    Returns:
        Stored value or None if the key does not exist.
    """
    return await _get_redis().get(key)


async def increment(key: str, amount: int = 1) -> int:
    """Atomically increment an integer counter.

    Args:
        key: Counter key (created at 0 when missing).
        amount: Increment step.

    Returns:
        Counter value after the increment.
    """
    if amount == 1:
        return await _get_redis().incr(key)
    return await _get_redis().incrby(key, amount)


# ============================================================
# Counters
# ============================================================


def event_counter_key(event_type: str) -> str:
    """Key of the counter bumped for every tracked `event_type`."""
    return f"{PREFIX_COUNTER}{event_type}"


def product_sales_key(product_id: str) -> str:
    """Key of the running sales total for `product_id`."""
    return f"{PREFIX_PRODUCT_SALES}{product_id}"


async def incr_event_counter(event_type: str) -> int:
    """Increment the counter for an event type, returning the new value."""
    return await increment(event_counter_key(event_type))


async def incr_product_sales(product_id: str, quantity: int) -> int:
    """Add `quantity` to a product's sales total, returning the new value."""
    return await increment(product_sales_key(product_id), quantity)


async def get_counters(keys: list[str]) -> list[str | None]:
    """Read several counters in a single round trip (MGET)."""
    if not keys:
        return []
    return await _get_redis().mget(keys)
