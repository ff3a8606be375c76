"""Pydantic schemas for API request/response validation."""

from app.schemas.accounts import ApiKeyResponse
from app.schemas.common import ErrorDetail, ErrorResponse, api_error
from app.schemas.metrics import MetricsResponse
from app.schemas.tracking import PurchaseResponse, TrackResponse, UserOut

__all__ = [
    "ApiKeyResponse",
    "ErrorDetail",
    "ErrorResponse",
    "MetricsResponse",
    "PurchaseResponse",
    "TrackResponse",
    "UserOut",
    "api_error",
]
