"""
Snippetbox — User SQLAlchemy Model
====================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for signup, login and password changes.

Table Design:
    - email carries a named unique constraint (users_uc_email); the service
      layer turns violations of it into DuplicateEmailError.
    - hashed_password stores the full argon2 encoded hash (algorithm,
      parameters and salt are embedded in the string).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the account was created (UTC)",
    )

    __table_args__ = (
        UniqueConstraint("email", name="users_uc_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
