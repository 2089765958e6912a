"""
Snippetbox — User Service (Accounts & Credentials)
====================================================

What:  Account creation, credential checks and password changes.
How:   Passwords are hashed with argon2 (argon2-cffi PasswordHasher). Hashing
       and verification are CPU-bound, so they run in Starlette's threadpool
       instead of on the event loop.
Who:   Called by the user/account route handlers and the authentication
       dependency.

Failure Semantics:
    insert()            → DuplicateEmailError when the email is taken
    authenticate()      → InvalidCredentialsError for unknown email OR wrong
                          password (callers cannot tell which)
    password_update()   → InvalidCredentialsError when the current password
                          does not verify
    get()               → NoRecordError when the user does not exist
"""

import logging
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from snippetbox.exceptions import (
    DatabaseError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NoRecordError,
)
from snippetbox.models.user import User

logger = logging.getLogger(__name__)

password_hasher = PasswordHasher()


async def hash_password(password: str) -> str:
    return await run_in_threadpool(password_hasher.hash, password)


async def verify_password(hashed_password: str, password: str) -> bool:
    """Returns False on mismatch or on a stored hash argon2 cannot parse."""
    try:
        return await run_in_threadpool(password_hasher.verify, hashed_password, password)
    except (VerificationError, InvalidHashError):
        return False


def _is_duplicate_email(error: IntegrityError) -> bool:
    # PostgreSQL reports the constraint name, SQLite the column
    detail = str(error.orig)
    return "users_uc_email" in detail or "users.email" in detail


class UserService:
    """Data-access and credential logic for user accounts."""

    async def insert(self, db: AsyncSession, name: str, email: str, password: str) -> int:
        """
        Create a user and return its id.

        Raises:
            DuplicateEmailError: The email address is already registered
            DatabaseError: Any other database failure
        """
        user = User(
            name=name,
            email=email,
            hashed_password=await hash_password(password),
        )
        try:
            db.add(user)
            await db.commit()
        except IntegrityError as e:
            # The failed commit leaves the transaction unusable
            await db.rollback()
            if _is_duplicate_email(e):
                raise DuplicateEmailError(email=email)
            logger.error("Integrity error inserting user: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})
        except Exception as e:
            logger.error("Database error inserting user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("User %s signed up", user.id)
        return user.id

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> int:
        """
        Return the id of the user owning these credentials.

        When argon2 parameters have changed since the hash was created, the
        stored hash is upgraded in place after a successful verification.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        user = await self._find_by_email(db, email)
        if user is None:
            raise InvalidCredentialsError()

        if not await verify_password(user.hashed_password, password):
            raise InvalidCredentialsError(context={"user_id": user.id})

        if password_hasher.check_needs_rehash(user.hashed_password):
            user.hashed_password = await hash_password(password)
            await db.commit()
            logger.info("Upgraded password hash for user %s", user.id)

        return user.id

    async def exists(self, db: AsyncSession, user_id: int) -> bool:
        try:
            result = await db.execute(
                select(func.count(User.id)).where(User.id == user_id)
            )
            return (result.scalar() or 0) > 0
        except Exception as e:
            logger.error("Database error checking user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

    async def get(self, db: AsyncSession, user_id: int) -> User:
        """
        Raises:
            NoRecordError: No user with this id
        """
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        if user is None:
            raise NoRecordError(resource="user", resource_id=str(user_id))
        return user

    async def password_update(
        self,
        db: AsyncSession,
        user_id: int,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Replace a user's password after verifying the current one.

        Raises:
            NoRecordError: No user with this id
            InvalidCredentialsError: current_password does not match
        """
        user = await self.get(db, user_id)

        if not await verify_password(user.hashed_password, current_password):
            raise InvalidCredentialsError(context={"user_id": user_id})

        user.hashed_password = await hash_password(new_password)
        await db.commit()
        logger.info("Password updated for user %s", user_id)

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})


user_service = UserService()
