"""API routes."""

from fastapi import APIRouter, Depends

from app.routes import accounts, dashboard, metrics, tracking
from app.routes.accounts import require_api_key

api_router = APIRouter()

# Dashboard page (polls /metrics)
api_router.include_router(dashboard.router, tags=["dashboard"])

# Metrics endpoint (public)
api_router.include_router(metrics.router, prefix="/metrics", tags=["metrics"])

# Registration / API keys (public)
api_router.include_router(accounts.router, tags=["accounts"])

# Tracking endpoints (API key required)
api_router.include_router(
    tracking.router,
    tags=["tracking"],
    dependencies=[Depends(require_api_key)],
)
