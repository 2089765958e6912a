"""
Snippetbox — Session SQLAlchemy Model
=======================================

What:  ORM model backing the database session store (`sessions` table).
How:   One row per live session token; `data` holds the JSON-encoded session
       dictionary and `expiry` the absolute deadline after which the row is
       ignored and eventually purged.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)

    data: Mapped[str] = mapped_column(Text, nullable=False)

    expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_sessions_expiry", "expiry"),
    )

    def __repr__(self) -> str:
        return f"<SessionRecord(token='{self.token[:8]}…', expiry='{self.expiry}')>"
