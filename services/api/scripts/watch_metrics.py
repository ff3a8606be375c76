#!/usr/bin/env python3
"""Terminal dashboard: poll GET /metrics and print the counts.

Mirrors the browser dashboard: fetch immediately, then every interval.
Fetch errors are logged and polling continues; Ctrl-C stops it.

Usage:
    cd services/api
    python -m scripts.watch_metrics          # poll forever
    python -m scripts.watch_metrics --once   # single snapshot, exit 1 on failure

Optional env vars:
  METRICS_URL="http://localhost:8080/metrics"
  METRICS_INTERVAL=2
"""

import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import Any

import httpx
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("watch_metrics")

DEFAULT_URL = "http://localhost:8080/metrics"
DEFAULT_INTERVAL = 2.0


async def fetch_metrics(client: httpx.AsyncClient, url: str) -> dict[str, Any] | None:
    """Fetch one metrics snapshot, or None (logged) on any HTTP failure."""
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Failed to fetch metrics from {url}: {e}")
        return None


def format_metrics(metrics: dict[str, Any], now: datetime | None = None) -> str:
    now = now or datetime.now()
    return (
        f"[{now:%H:%M:%S}] "
        f"Total Events (Postgres): {metrics.get('postgres_events', 0)} | "
        f"Real-Time Page Views (Redis): {metrics.get('redis_pageviews', 0)}"
    )


async def watch(url: str, interval: float, client: httpx.AsyncClient, max_polls: int | None = None) -> int:
    """Poll until cancelled (or `max_polls` reached); returns number of successful polls."""
    ok = 0
    polls = 0
    while max_polls is None or polls < max_polls:
        metrics = await fetch_metrics(client, url)
        polls += 1
        if metrics is not None:
            ok += 1
            print(format_metrics(metrics), flush=True)
        if max_polls is not None and polls >= max_polls:
            break
        await asyncio.sleep(interval)
    return ok


async def main(argv: list[str]) -> int:
    url = os.getenv("METRICS_URL", DEFAULT_URL)
    interval = float(os.getenv("METRICS_INTERVAL", str(DEFAULT_INTERVAL)))
    once = "--once" in argv

    async with httpx.AsyncClient(timeout=httpx.Timeout(5.0)) as client:
        if once:
            return 0 if await watch(url, interval, client, max_polls=1) else 1
        await watch(url, interval, client)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        sys.exit(asyncio.run(main(sys.argv[1:])))
    except KeyboardInterrupt:
        sys.exit(0)
