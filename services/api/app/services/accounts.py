"""Account service: user registration and API key management.

Each user gets exactly one API key at registration. Keys are 128-bit random
tokens, hex-encoded, and are looked up verbatim on every authenticated request.
"""

from __future__ import annotations

import logging
import secrets

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models import ApiKey, User
from app.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

API_KEY_BYTES = 16


class AccountError(RuntimeError):
    pass


class UserExistsError(AccountError):
    pass


def generate_api_key() -> str:
    """Return a fresh 128-bit API key as 32 hex characters."""
    return secrets.token_hex(API_KEY_BYTES)


async def register_user(user_id: str) -> str:
    """Create a user and issue its API key in one transaction.

    Args:
        user_id: Caller-chosen user identifier.

    Returns:
        The new API key.

    Raises:
        UserExistsError: If the user is already registered.
    """
    api_key = generate_api_key()
    try:
        async with get_session() as session:
            existing = await session.get(User, user_id)
            if existing is not None:
                raise UserExistsError(f"User {user_id} already registered")

            session.add(User(user_id=user_id))
            # users row must exist before the api_keys FK insert
            await session.flush()
            session.add(ApiKey(user_id=user_id, api_key=api_key))
            await session.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same user_id.
        raise UserExistsError(f"User {user_id} already registered") from e

    logger.info(f"Registered user {user_id}")
    return api_key


async def get_api_key(user_id: str) -> str | None:
    """Look up a user's API key, or None if the user is unknown."""
    async with get_session() as session:
        result = await session.execute(select(ApiKey.api_key).where(ApiKey.user_id == user_id))
        return result.scalar_one_or_none()


async def is_valid_api_key(api_key: str) -> bool:
    """Check whether an API key was issued.

    Lookup failures are logged and treated as invalid.
    """
    if not api_key:
        return False
    try:
        async with get_session() as session:
            result = await session.execute(
                select(ApiKey.id).where(ApiKey.api_key == api_key).limit(1)
            )
            return result.scalar_one_or_none() is not None
    except Exception:
        logger.exception("API key lookup failed")
        return False
