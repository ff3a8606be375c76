"""Schemas for registration and API key lookup."""

from pydantic import BaseModel


class ApiKeyResponse(BaseModel):
    """A user's API key."""

    user_id: str
    api_key: str
