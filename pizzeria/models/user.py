"""User ORM — persists customer accounts.

Invariants:
    - email is the primary key (one account per address)
    - hashed_password is never serialized to callers
    - deleting a user cascades to their tokens and cart

Design Decisions:
    - Natural key over surrogate UUID: every request identifies the caller by email
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pizzeria.db.base import Base


class User(Base):
    """Customer account: owns tokens and a cart."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    street_address: Mapped[str] = mapped_column(String(200), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    tokens: Mapped[list["Token"]] = relationship(
        "Token", back_populates="user",
        cascade="all, delete-orphan", lazy="selectin",
    )
    cart: Mapped[Optional["Cart"]] = relationship(
        "Cart", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )

    def to_entity(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "street_address": self.street_address,
        }
