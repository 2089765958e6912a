"""
Snippetbox — Server-Side Session Store
========================================

What:  Session state kept on the server and addressed by an opaque token
       that travels in a cookie.
How:   `Session` is the per-request view handlers read and write. A
       `SessionStore` persists it between requests; SessionMiddleware
       (snippetbox/middleware/session.py) loads it before the handler runs
       and commits it afterwards.
Who:   Handlers (authentication state, flash messages, CSRF token,
       post-login redirect path), the security dependencies, and the
       lifespan cleanup task.

Stores:
    DatabaseSessionStore: rows in the `sessions` table, JSON-encoded data.
                          Shared by every worker; survives restarts.
    MemorySessionStore:   a dict in the current process. Development/tests.

Lifetime:
    Sessions carry an absolute deadline (settings.session_lifetime after
    creation). Expired sessions are never returned by find(), and
    delete_expired() purges them periodically.
"""

import asyncio
import json
import logging
import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import delete, select

from snippetbox.config import Settings
from snippetbox.database import async_session_factory
from snippetbox.models.session import SessionRecord

logger = logging.getLogger(__name__)

_MISSING = object()


def generate_token() -> str:
    """32 random bytes, URL-safe base64 (43 characters)."""
    return secrets.token_urlsafe(32)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Session:
    """
    Session data for a single request.

    A Session starts either from a stored record (token and deadline known)
    or empty (no token yet). It only becomes persistent once something
    modifies it; the middleware then assigns a token if needed.

    Attributes:
        token:          Current token, None until first saved
        data:           The session dictionary (JSON-serializable values)
        deadline:       Absolute expiry, None until first saved
        modified:       Data or token changed during this request
        destroyed:      destroy() was called
        previous_token: Token replaced by renew_token(), deleted on save
    """

    def __init__(
        self,
        token: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        deadline: Optional[datetime] = None,
    ):
        self.token = token
        self.data: Dict[str, Any] = data or {}
        self.deadline = deadline
        self.modified = False
        self.destroyed = False
        self.previous_token: Optional[str] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.modified = True

    def pop(self, key: str, default: Any = None) -> Any:
        """Return and remove a value (used for one-shot flash messages)."""
        value = self.data.pop(key, _MISSING)
        if value is _MISSING:
            return default
        self.modified = True
        return value

    def remove(self, key: str) -> None:
        if key in self.data:
            del self.data[key]
            self.modified = True

    def exists(self, key: str) -> bool:
        return key in self.data

    def renew_token(self) -> None:
        """
        Move the data to a fresh token.

        Called on every privilege change (login, logout) so a token observed
        before authentication is useless afterwards. The deadline restarts.
        """
        if self.token is not None and self.previous_token is None:
            self.previous_token = self.token
        self.token = generate_token()
        self.deadline = None
        self.modified = True

    def destroy(self) -> None:
        self.data.clear()
        self.destroyed = True
        self.modified = True


class SessionStore(ABC):
    """Persistence interface for session data."""

    @abstractmethod
    async def find(self, token: str) -> Optional[Tuple[Dict[str, Any], datetime]]:
        """Return (data, deadline) for a live token, or None."""

    @abstractmethod
    async def commit(self, token: str, data: Dict[str, Any], expiry: datetime) -> None:
        """Insert or replace the record for token."""

    @abstractmethod
    async def delete(self, token: str) -> None:
        """Remove the record for token; unknown tokens are ignored."""

    @abstractmethod
    async def delete_expired(self) -> int:
        """Purge expired records and return how many were removed."""

    async def load(self, token: Optional[str]) -> Session:
        """Build the request Session for a cookie value (possibly absent)."""
        if token:
            found = await self.find(token)
            if found is not None:
                data, deadline = found
                return Session(token=token, data=data, deadline=deadline)
        return Session()


class MemorySessionStore(SessionStore):
    """
    In-process store.

    Data is kept JSON-encoded so values behave exactly as they would after a
    round trip through the database store.
    """

    def __init__(self):
        self._records: Dict[str, Tuple[str, datetime]] = {}

    async def find(self, token: str) -> Optional[Tuple[Dict[str, Any], datetime]]:
        record = self._records.get(token)
        if record is None:
            return None
        payload, expiry = record
        if expiry <= datetime.now(timezone.utc):
            return None
        return json.loads(payload), expiry

    async def commit(self, token: str, data: Dict[str, Any], expiry: datetime) -> None:
        self._records[token] = (json.dumps(data), _as_utc(expiry))

    async def delete(self, token: str) -> None:
        self._records.pop(token, None)

    async def delete_expired(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [token for token, (_, expiry) in self._records.items() if expiry <= now]
        for token in expired:
            del self._records[token]
        return len(expired)


class DatabaseSessionStore(SessionStore):
    """
    Store backed by the `sessions` table.

    Each operation runs in its own short transaction, independent of the
    request's get_db_session() session, because the middleware commits
    after the handler's transaction has already finished.
    """

    def __init__(self, session_factory=async_session_factory):
        self._session_factory = session_factory

    async def find(self, token: str) -> Optional[Tuple[Dict[str, Any], datetime]]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(SessionRecord).where(
                    SessionRecord.token == token,
                    SessionRecord.expiry > datetime.now(timezone.utc),
                )
            )
            record = result.scalar_one_or_none()
        if record is None:
            return None
        return json.loads(record.data), _as_utc(record.expiry)

    async def commit(self, token: str, data: Dict[str, Any], expiry: datetime) -> None:
        async with self._session_factory() as db:
            record = await db.get(SessionRecord, token)
            if record is None:
                db.add(SessionRecord(token=token, data=json.dumps(data), expiry=expiry))
            else:
                record.data = json.dumps(data)
                record.expiry = expiry
            await db.commit()

    async def delete(self, token: str) -> None:
        async with self._session_factory() as db:
            await db.execute(delete(SessionRecord).where(SessionRecord.token == token))
            await db.commit()

    async def delete_expired(self) -> int:
        async with self._session_factory() as db:
            result = await db.execute(
                delete(SessionRecord).where(SessionRecord.expiry <= datetime.now(timezone.utc))
            )
            await db.commit()
            return result.rowcount or 0


def build_session_store(config: Settings) -> SessionStore:
    if config.session_store == "memory":
        return MemorySessionStore()
    return DatabaseSessionStore()


def new_deadline(config: Settings) -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=config.session_lifetime)


async def run_cleanup(store: SessionStore, interval: int) -> None:
    """
    Background loop purging expired sessions every `interval` seconds.

    Started by the application lifespan and cancelled on shutdown. A failed
    purge is logged and retried on the next tick.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            removed = await store.delete_expired()
        except Exception as e:
            logger.error("Session cleanup failed: %s", str(e), exc_info=True)
            continue
        if removed:
            logger.debug("Purged %d expired sessions", removed)
