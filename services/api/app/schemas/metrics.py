"""Schemas for the dashboard metrics endpoint (/metrics)."""

from pydantic import BaseModel, Field


class MetricsResponse(BaseModel):
    """Latest usage counts, one from each store."""

    postgres_events: int = Field(ge=0, description="Rows in the events table")
    redis_pageviews: int = Field(description="Value of the page view counter (0 when unset)")
