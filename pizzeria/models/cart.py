"""Cart ORM — one shopping cart per user.

Invariants:
    - email is both primary key and foreign key: at most one cart per user
    - items is a JSON list of {"menu_item_id": int, "quantity": int}

Design Decisions:
    - JSON column for items: the cart is always read and written whole
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pizzeria.db.base import Base


class Cart(Base):
    """Shopping cart owned by one user."""
    __tablename__ = "carts"

    email: Mapped[str] = mapped_column(
        String(254), ForeignKey("users.email", ondelete="CASCADE"),
        primary_key=True,
    )
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="cart")
