"""
Snippetbox — Snippet SQLAlchemy Model
=======================================

What:  ORM model representing the `snippets` table.
Who:   Used by SnippetService for creating, viewing and listing snippets.

Lifecycle:
    1. Created by an authenticated user with a lifetime of 1, 7 or 365 days
    2. Visible while expires > now (UTC)
    3. Never updated; expired rows are simply filtered out of every query

Query Patterns:
    - Get single snippet: WHERE id = :id AND expires > :now  → primary key
    - Latest snippets:    WHERE expires > :now ORDER BY id DESC LIMIT 10
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class Snippet(Base):
    """A piece of text shared by a user, visible until it expires."""

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When this snippet was created (UTC)",
    )

    expires: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="After this instant (UTC) the snippet is no longer served",
    )

    # Owner; nullable so rows survive if accounts are ever removed
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        Index("idx_snippets_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', expires='{self.expires}')>"
