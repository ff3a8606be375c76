"""Dashboard metrics endpoint.

GET /metrics - Returns the latest event count and page view counter.

Public: the dashboard polls this every two seconds without credentials.
"""

from fastapi import APIRouter

from app.schemas import ErrorResponse, MetricsResponse, api_error
from app.services.metrics import MetricsError, get_metrics

router = APIRouter()


@router.get(
    "",
    response_model=MetricsResponse,
    responses={503: {"model": ErrorResponse}},
)
async def read_metrics() -> MetricsResponse:
    """Get the current usage counts.

    Returns:
        MetricsResponse with postgres_events and redis_pageviews.

    Raises:
        HTTPException 503: If either store cannot be read.
    """
    try:
        return await get_metrics()
    except MetricsError as e:
        raise api_error(
            status_code=503,
            code="METRICS_UNAVAILABLE",
            message="Metrics are temporarily unavailable",
            detail={"reason": str(e)},
        ) from e
