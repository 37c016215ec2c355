"""Token ORM — session credentials issued to users.

Invariants:
    - id is the opaque bearer credential sent in the `token` header
    - expires is an absolute instant in epoch milliseconds

Design Decisions:
    - BigInteger millis over DateTime: timezone-free comparison on every backend
"""

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pizzeria.db.base import Base


class Token(Base):
    """Bearer token owned by one user."""
    __tablename__ = "tokens"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(254), ForeignKey("users.email", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    expires: Mapped[int] = mapped_column(BigInteger, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="tokens")

    def to_entity(self) -> dict:
        return {"id": self.id, "email": self.email, "expires": self.expires}
