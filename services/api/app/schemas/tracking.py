"""Schemas for the authenticated tracking endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class TrackResponse(BaseModel):
    """Result of POST /track."""

    message: str
    event: str
    user_id: str
    count: int = Field(description="Counter value for this event type after the increment")


class UserOut(BaseModel):
    """A registered user as listed by GET /users."""

    user_id: str
    registered_at: datetime

    model_config = {"from_attributes": True}


class PurchaseResponse(BaseModel):
    """Result of POST /purchases."""

    message: str
    user_id: str
    product_id: str
    quantity: int = Field(ge=1)
    total_sold: int = Field(description="Running sales total for the product")
