"""
Snippetbox — Snippet Service (Data Access)
============================================

What:  Parameterized queries for creating, fetching and listing snippets.
How:   SQLAlchemy Core-style select() statements executed on the request's
       AsyncSession; writes commit before returning, so a redirect issued
       right after an insert always points at a stored row.
Who:   Called by the snippet route handlers.

Expiry Rule:
    Every read filters on `expires > now (UTC)`. A snippet that has expired
    behaves exactly like one that never existed: get() raises NoRecordError
    and latest() leaves it out.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.exceptions import DatabaseError, NoRecordError
from snippetbox.models.snippet import Snippet

logger = logging.getLogger(__name__)

LATEST_LIMIT = 10


class SnippetService:
    """
    Data-access layer for snippets.

    Error Handling Strategy:
        NoRecordError propagates unchanged (handlers turn it into a 404).
        Anything else raised by the driver is logged and wrapped in
        DatabaseError so internal details never reach a response.
    """

    async def insert(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        expires_days: int,
        user_id: Optional[int] = None,
    ) -> int:
        """
        Store a new snippet and return its id.

        Args:
            db: Async database session
            title: Snippet title (already validated, at most 100 characters)
            content: Snippet body
            expires_days: Lifetime in days, counted from the creation instant
            user_id: Owner of the snippet, if known

        Returns:
            The primary key assigned by the database.
        """
        created = datetime.now(timezone.utc)
        snippet = Snippet(
            title=title,
            content=content,
            created=created,
            expires=created + timedelta(days=expires_days),
            user_id=user_id,
        )
        try:
            db.add(snippet)
            await db.commit()
        except Exception as e:
            logger.error("Database error inserting snippet: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the snippet. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Snippet %s created (expires in %d days)", snippet.id, expires_days)
        return snippet.id

    async def get(self, db: AsyncSession, snippet_id: int) -> Snippet:
        """
        Return a single non-expired snippet.

        Raises:
            NoRecordError: No snippet with this id, or it has expired
            DatabaseError: Query execution failed
        """
        try:
            result = await db.execute(
                select(Snippet).where(
                    Snippet.id == snippet_id,
                    Snippet.expires > datetime.now(timezone.utc),
                )
            )
            snippet = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the snippet. Please try again.",
                context={"snippet_id": snippet_id},
            )

        if snippet is None:
            raise NoRecordError(resource="snippet", resource_id=str(snippet_id))
        return snippet

    async def latest(self, db: AsyncSession, limit: int = LATEST_LIMIT) -> List[Snippet]:
        """
        Return the most recently created non-expired snippets, newest first.

        Query plan:
            SELECT ... FROM snippets WHERE expires > :now
            ORDER BY id DESC LIMIT :limit
        """
        try:
            result = await db.execute(
                select(Snippet)
                .where(Snippet.expires > datetime.now(timezone.utc))
                .order_by(desc(Snippet.id))
                .limit(limit)
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing snippets: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve snippets. Please try again.",
                context={"error_type": type(e).__name__},
            )


snippet_service = SnippetService()
