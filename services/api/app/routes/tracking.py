"""Authenticated tracking endpoints.

POST /track      - Record an event and bump its counter
GET  /users      - List registered users
POST /purchases  - Record a purchase and bump the product's sales total
GET  /products   - Sales totals per product

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Query

from app.schemas import ErrorResponse, PurchaseResponse, TrackResponse, UserOut, api_error
from app.services.tracking import (
    InvalidProductError,
    get_product_sales,
    list_users,
    parse_quantity,
    record_purchase,
    track_event,
)

router = APIRouter()


def _missing(*values: str | None) -> bool:
    return any(not v or not v.strip() for v in values)


@router.post("/track", response_model=TrackResponse, responses={400: {"model": ErrorResponse}})
async def track(
    event: str | None = Query(default=None, max_length=100, examples=["page_view"]),
    user_id: str | None = Query(default=None, max_length=200),
) -> TrackResponse:
    """Track a single event for a user."""
    if _missing(event, user_id):
        raise api_error(status_code=400, code="MISSING_PARAMETERS", message="Missing event or user_id")

    event = event.strip()
    user_id = user_id.strip()
    count = await track_event(user_id=user_id, event_type=event)
    return TrackResponse(
        message=f"Event {event} tracked for user {user_id}",
        event=event,
        user_id=user_id,
        count=count,
    )


@router.get("/users", response_model=list[UserOut])
async def get_users() -> list[UserOut]:
    """List users, most recently registered first."""
    users = await list_users()
    return [UserOut.model_validate(u) for u in users]


@router.post(
    "/purchases",
    response_model=PurchaseResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
async def purchase(
    user_id: str | None = Query(default=None, max_length=200),
    product_id: str | None = Query(default=None, max_length=50, examples=["apples"]),
    quantity: str | None = Query(default=None, description="Defaults to 1; non-positive values count as 1"),
) -> PurchaseResponse:
    """Record a purchase of an allowed product."""
    if _missing(user_id, product_id):
        raise api_error(status_code=400, code="MISSING_PARAMETERS", message="Missing user_id or product_id")

    user_id = user_id.strip()
    product_id = product_id.strip()
    qty = parse_quantity(quantity)
    try:
        total = await record_purchase(user_id=user_id, product_id=product_id, quantity=qty)
    except InvalidProductError as e:
        raise api_error(
            status_code=400,
            code="INVALID_PRODUCT",
            message=str(e),
            detail={"product_id": product_id},
        ) from e

    return PurchaseResponse(
        message=f"User {user_id} bought {qty} of product {product_id}",
        user_id=user_id,
        product_id=product_id,
        quantity=qty,
        total_sold=total,
    )


@router.get("/products", response_model=dict[str, int])
async def get_products() -> dict[str, int]:
    """Units sold per product."""
    return await get_product_sales()
