"""Purchase model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class Purchase(Base):
    """A product purchase recorded for a user."""

    __tablename__ = "purchases"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(String(200), index=True)
    product_id: Mapped[str] = mapped_column(String(50), index=True)
    quantity: Mapped[int] = mapped_column(default=1)

    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Purchase {self.quantity}x {self.product_id} user={self.user_id}>"
