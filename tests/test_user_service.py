"""
Snippetbox — User Service Tests
=================================

What:  Signup, authentication, existence checks and password changes
       against the real SQLite test database.
"""

import pytest

from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError, NoRecordError
from snippetbox.services.user_service import UserService, hash_password, verify_password


class TestPasswordHashing:
    @pytest.mark.asyncio
    async def test_hash_is_not_plaintext(self):
        hashed = await hash_password("pa$$word123")
        assert hashed != "pa$$word123"
        assert hashed.startswith("$argon2")

    @pytest.mark.asyncio
    async def test_verify(self):
        hashed = await hash_password("pa$$word123")
        assert await verify_password(hashed, "pa$$word123") is True
        assert await verify_password(hashed, "wrong") is False

    @pytest.mark.asyncio
    async def test_verify_garbage_hash(self):
        assert await verify_password("not-a-hash", "anything") is False


class TestUserService:
    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_insert_and_get(self, db_session):
        user_id = await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        user = await self.service.get(db_session, user_id)

        assert user.name == "Alice"
        assert user.email == "alice@example.com"
        assert user.hashed_password != "pa$$word123"
        assert user.created is not None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session):
        await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        with pytest.raises(DuplicateEmailError):
            await self.service.insert(db_session, "Other", "alice@example.com", "pa$$word456")

        # The session is still usable after the failed insert
        assert await self.service.exists(db_session, 1) is True

    @pytest.mark.asyncio
    async def test_authenticate(self, db_session):
        user_id = await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        assert await self.service.authenticate(db_session, "alice@example.com", "pa$$word123") == user_id

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, db_session):
        await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        with pytest.raises(InvalidCredentialsError):
            await self.service.authenticate(db_session, "alice@example.com", "nope-nope")

    @pytest.mark.asyncio
    async def test_authenticate_unknown_email(self, db_session):
        with pytest.raises(InvalidCredentialsError):
            await self.service.authenticate(db_session, "nobody@example.com", "pa$$word123")

    @pytest.mark.asyncio
    async def test_exists(self, db_session):
        user_id = await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        assert await self.service.exists(db_session, user_id) is True
        assert await self.service.exists(db_session, user_id + 1) is False

    @pytest.mark.asyncio
    async def test_get_missing(self, db_session):
        with pytest.raises(NoRecordError):
            await self.service.get(db_session, 999)

    @pytest.mark.asyncio
    async def test_password_update(self, db_session):
        user_id = await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        await self.service.password_update(db_session, user_id, "pa$$word123", "new-pa$$word")

        assert await self.service.authenticate(db_session, "alice@example.com", "new-pa$$word") == user_id
        with pytest.raises(InvalidCredentialsError):
            await self.service.authenticate(db_session, "alice@example.com", "pa$$word123")

    @pytest.mark.asyncio
    async def test_password_update_wrong_current(self, db_session):
        user_id = await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123")

        with pytest.raises(InvalidCredentialsError):
            await self.service.password_update(db_session, user_id, "wrong-one", "new-pa$$word")
