"""Dashboard metrics service.

Two independent point reads:
- postgres_events: COUNT(*) over the events table
- redis_pageviews: current value of the page view counter (0 when unset)

The reads are not correlated; no ordering or consistency between them is implied.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import func, select

from app.models import Event
from app.schemas import MetricsResponse
from app.settings import get_settings
from app.stores.postgres import get_session
from app.stores.redis import get_value

logger = logging.getLogger("uvicorn.error")


class MetricsError(RuntimeError):
    pass


def parse_counter(value: str | int | None) -> int:
    """Convert a raw Redis counter value to int.

    Missing keys read as 0. Anything that is not an integer raises MetricsError.
    """
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise MetricsError(f"Counter holds a non-integer value: {value!r}") from e


async def count_events() -> int:
    """Total number of rows in the events table."""
    async with get_session() as session:
        result = await session.execute(select(func.count()).select_from(Event))
        return int(result.scalar_one())


async def get_pageviews() -> int:
    """Current value of the page view counter."""
    raw = await get_value(get_settings().pageview_key)
    return parse_counter(raw)


async def get_metrics() -> MetricsResponse:
    """Read both metrics.

    Raises:
        MetricsError: If either store read fails.
    """
    events_task = asyncio.ensure_future(count_events())
    pageviews_task = asyncio.ensure_future(get_pageviews())
    try:
        postgres_events, redis_pageviews = await asyncio.gather(events_task, pageviews_task)
    except Exception as e:
        # One read failed: stop the other and collect its outcome.
        for task in (events_task, pageviews_task):
            task.cancel()
        await asyncio.gather(events_task, pageviews_task, return_exceptions=True)
        logger.exception("Metrics read failed")
        if isinstance(e, MetricsError):
            raise
        raise MetricsError(str(e) or type(e).__name__) from e

    return MetricsResponse(postgres_events=postgres_events, redis_pageviews=redis_pageviews)
