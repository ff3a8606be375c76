"""SQLAlchemy ORM models.

Models represent database tables:
- users: Registered users
- api_keys: One API key per user
- events: Tracked events (counted by /metrics)
- purchases: Product purchases
"""

from app.models.api_key import ApiKey
from app.models.event import Event
from app.models.purchase import Purchase
from app.models.user import User

__all__ = ["ApiKey", "Event", "Purchase", "User"]
