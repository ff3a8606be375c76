"""Registration and API key endpoints.

POST /register     - Create a user and issue its API key (public)
GET  /get-api-key  - Look up a user's API key (public)

Also provides `require_api_key`, the dependency guarding the tracking routes.
"""

import logging

from fastapi import APIRouter, Header, Query

from app.schemas import ApiKeyResponse, ErrorResponse, api_error
from app.services.accounts import UserExistsError, get_api_key, is_valid_api_key, register_user

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


def _require_user_id(user_id: str | None) -> str:
    if not user_id or not user_id.strip():
        raise api_error(status_code=400, code="MISSING_USER_ID", message="Missing user_id")
    return user_id.strip()


async def require_api_key(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> str:
    """Resolve the caller's API key from the Authorization header.

    The header carries the raw key; a "Bearer " prefix is tolerated.

    Raises:
        HTTPException 401: If the header is missing or the key is unknown.
    """
    api_key = (authorization or "").strip()
    if api_key.lower().startswith("bearer "):
        api_key = api_key[7:].strip()

    if not api_key or not await is_valid_api_key(api_key):
        raise api_error(status_code=401, code="UNAUTHORIZED", message="Unauthorized")
    return api_key


@router.post(
    "/register",
    response_model=ApiKeyResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    user_id: str | None = Query(default=None, max_length=200, description="User identifier"),
) -> ApiKeyResponse:
    """Register a user and return a freshly issued API key."""
    user_id = _require_user_id(user_id)
    try:
        api_key = await register_user(user_id)
    except UserExistsError as e:
        raise api_error(
            status_code=409,
            code="USER_EXISTS",
            message=str(e),
            detail={"user_id": user_id},
        ) from e
    return ApiKeyResponse(user_id=user_id, api_key=api_key)


@router.get(
    "/get-api-key",
    response_model=ApiKeyResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def read_api_key(
    user_id: str | None = Query(default=None, max_length=200, description="User identifier"),
) -> ApiKeyResponse:
    """Return the API key issued to `user_id`."""
    user_id = _require_user_id(user_id)
    api_key = await get_api_key(user_id)
    if api_key is None:
        raise api_error(
            status_code=404,
            code="USER_NOT_FOUND",
            message="User not found",
            detail={"user_id": user_id},
        )
    return ApiKeyResponse(user_id=user_id, api_key=api_key)
