"""
Snippetbox — Snippet Service Tests
====================================

What:  Tests for SnippetService insert/get/latest.
How:   Error paths use a mock session; expiry and ordering use the real
       SQLite test database.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from snippetbox.exceptions import DatabaseError, NoRecordError
from snippetbox.services.snippet_service import SnippetService


class TestSnippetServiceMocked:
    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_db_session, sample_snippet_data):
        mock_snippet = MagicMock(**sample_snippet_data)
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = mock_snippet
        mock_db_session.execute.return_value = mock_result

        result = await self.service.get(mock_db_session, 1)

        assert result is mock_snippet
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NoRecordError):
            await self.service.get(mock_db_session, 42)

    @pytest.mark.asyncio
    async def test_get_wraps_driver_errors(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("connection reset"))

        with pytest.raises(DatabaseError):
            await self.service.get(mock_db_session, 1)

    @pytest.mark.asyncio
    async def test_latest_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        assert await self.service.latest(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_insert_commit_failure(self, mock_db_session):
        mock_db_session.commit = AsyncMock(side_effect=RuntimeError("disk full"))

        with pytest.raises(DatabaseError):
            await self.service.insert(mock_db_session, "t", "c", 7)


class TestSnippetServiceDatabase:
    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_insert_and_get(self, db_session):
        snippet_id = await self.service.insert(db_session, "Title", "Content", 7)

        snippet = await self.service.get(db_session, snippet_id)

        assert snippet.title == "Title"
        assert snippet.content == "Content"
        assert (snippet.expires - snippet.created).days == 7

    @pytest.mark.asyncio
    async def test_expired_snippet_is_not_returned(self, db_session):
        snippet_id = await self.service.insert(db_session, "Old", "Gone", -1)

        with pytest.raises(NoRecordError):
            await self.service.get(db_session, snippet_id)
        assert await self.service.latest(db_session) == []

    @pytest.mark.asyncio
    async def test_latest_newest_first_and_limited(self, db_session):
        ids = [
            await self.service.insert(db_session, f"Snippet {i}", "body", 365)
            for i in range(12)
        ]

        latest = await self.service.latest(db_session)

        assert len(latest) == 10
        assert [s.id for s in latest] == sorted(ids, reverse=True)[:10]

    @pytest.mark.asyncio
    async def test_insert_records_owner(self, db_session):
        from snippetbox.services.user_service import user_service

        user_id = await user_service.insert(db_session, "Owner", "owner@example.com", "password1")
        snippet_id = await self.service.insert(db_session, "Mine", "body", 1, user_id=user_id)

        snippet = await self.service.get(db_session, snippet_id)
        assert snippet.user_id == user_id
