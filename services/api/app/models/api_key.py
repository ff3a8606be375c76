"""API key model.

One key per user, issued at registration. Sent back by clients in the
Authorization header to reach the tracking endpoints.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class ApiKey(Base):
    """API key issued to a user."""

    __tablename__ = "api_keys"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(
        String(200),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )
    # 128-bit key, hex-encoded
    api_key: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<ApiKey user={self.user_id}>"
