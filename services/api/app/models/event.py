"""Tracked event model.

`SELECT COUNT(*) FROM events` is the dashboard's total events figure.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class Event(Base):
    """A single tracked event (page_view, signup, ...)."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(String(200), index=True)
    event_type: Mapped[str] = mapped_column(String(100), index=True)

    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Event {self.event_type} user={self.user_id}>"
