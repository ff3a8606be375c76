"""Tracking service: events, purchases and their real-time counters.

Every write lands in Postgres first, then bumps a Redis counter:
- track_event      -> events row, INCR counter:<event_type>
- record_purchase  -> purchases row, INCRBY sales:product:<product_id> <quantity>

If the counter update fails after the row was committed, the error propagates
and the two stores may drift by that one write. No reconciliation is attempted.
"""

from __future__ import annotations

import logging
import re

from redis.exceptions import RedisError
from sqlalchemy import select

from app.models import Event, Purchase, User
from app.settings import get_settings
from app.stores.postgres import get_session
from app.stores.redis import get_counters, incr_event_counter, incr_product_sales, product_sales_key

logger = logging.getLogger("uvicorn.error")

DEFAULT_QUANTITY = 1

# Leading integer, the rest of the string is ignored ("3x" -> 3)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class TrackingError(RuntimeError):
    pass


class InvalidProductError(TrackingError):
    pass


def parse_quantity(raw: str | None) -> int:
    """Parse the purchase quantity query parameter.

    Missing, unparseable, zero or negative values fall back to 1.
    """
    if raw is None:
        return DEFAULT_QUANTITY
    match = _LEADING_INT_RE.match(raw)
    if not match:
        return DEFAULT_QUANTITY
    quantity = int(match.group(1))
    return quantity if quantity > 0 else DEFAULT_QUANTITY


def allowed_products() -> list[str]:
    return list(get_settings().allowed_products)


async def track_event(user_id: str, event_type: str) -> int:
    """Persist an event and bump its counter.

    Returns:
        Counter value for `event_type` after the increment.
    """
    async with get_session() as session:
        session.add(Event(user_id=user_id, event_type=event_type))

    return await incr_event_counter(event_type)


async def list_users() -> list[User]:
    """All users, most recently registered first."""
    async with get_session() as session:
        result = await session.execute(select(User).order_by(User.registered_at.desc()))
        return list(result.scalars().all())


async def record_purchase(user_id: str, product_id: str, quantity: int) -> int:
    """Persist a purchase and add it to the product's sales total.

    Raises:
        InvalidProductError: If `product_id` is not a known product.

    Returns:
        Sales total for the product after the increment.
    """
    products = allowed_products()
    if product_id not in products:
        raise InvalidProductError(f"Invalid product_id: must be one of {', '.join(products)}")

    async with get_session() as session:
        session.add(Purchase(user_id=user_id, product_id=product_id, quantity=quantity))

    return await incr_product_sales(product_id, quantity)


def _counter_or_zero(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


async def get_product_sales() -> dict[str, int]:
    """Sales totals for every known product; missing counters read as 0."""
    products = allowed_products()
    try:
        values = await get_counters([product_sales_key(p) for p in products])
    except RedisError:
        logger.warning("Product sales counters unavailable, reporting zeros")
        values = [None] * len(products)
    return {product: _counter_or_zero(value) for product, value in zip(products, values)}
