# =============================================================================
# lib/session_store.py - Durable Session Store Clients
# =============================================================================
# Server-side storage for session records. The pipeline only talks to the
# SessionStore protocol, so the backing store is injected at startup:
# - RedisSessionStore: production store (redis.asyncio connection pool)
# - MemorySessionStore: process-local store for development and tests
#
# Records are plain JSON-serializable dicts keyed by session id. Each save
# refreshes the record's expiry (resave semantics).
#
# Usage:
#   from lib.session_store import RedisSessionStore
#   client = Redis.from_url("redis://localhost:6379/0", decode_responses=True)
#   store = RedisSessionStore(client)
#   await store.save("abc", {"returnTo": "/map"}, ttl_seconds=3600)
# =============================================================================

from __future__ import annotations

import json
import logging
import time
from typing import Any, Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SessionStoreError(ApplicationError):
    """Raised when the session store cannot be reached or returns bad data."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code="SESSION_STORE_ERROR",
            suggestion="Check that the database is running and DATABASE_URL is correct",
            details=details,
        )


class SessionStore(Protocol):
    """Capabilities the session stage needs from a store."""

    async def load(self, session_id: str) -> dict[str, Any] | None: ...

    async def save(self, session_id: str, data: dict[str, Any], ttl_seconds: int) -> None: ...

    async def destroy(self, session_id: str) -> None: ...

    async def ping(self) -> bool: ...


# =============================================================================
# Redis Store
# =============================================================================

class RedisSessionStore:
    """
    Session store backed by Redis.

    Each session lives under ``<prefix><session_id>`` as a JSON string with
    a TTL. Connection handling and reconnects are left to the redis client.
    """

    def __init__(self, client: Redis, prefix: str = "sess:"):
        self._client = client
        self._prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    async def load(self, session_id: str) -> dict[str, Any] | None:
        """
        Fetch a session record.

        Returns:
            The stored dict, or None if the session is unknown or expired

        Raises:
            SessionStoreError: If Redis is unreachable or the record is corrupt
        """
        try:
            raw = await self._client.get(self._key(session_id))
        except RedisError as e:
            logger.error(f"Failed to load session {session_id}: {e}")
            raise SessionStoreError(f"Failed to load session: {e}") from e

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise SessionStoreError(
                "Stored session is not valid JSON",
                details={"session_id": session_id},
            ) from e

        return data if isinstance(data, dict) else None

    async def save(self, session_id: str, data: dict[str, Any], ttl_seconds: int) -> None:
        try:
            await self._client.set(self._key(session_id), json.dumps(data), ex=ttl_seconds)
        except RedisError as e:
            logger.error(f"Failed to save session {session_id}: {e}")
            raise SessionStoreError(f"Failed to save session: {e}") from e

    async def destroy(self, session_id: str) -> None:
        try:
            await self._client.delete(self._key(session_id))
        except RedisError as e:
            raise SessionStoreError(f"Failed to destroy session: {e}") from e

    async def ping(self) -> bool:
        """
        Check connectivity.

        Raises:
            SessionStoreError: If the server does not answer
        """
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            raise SessionStoreError(f"Redis is unreachable: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()


# =============================================================================
# In-Memory Store
# =============================================================================

class MemorySessionStore:
    """
    Process-local session store.

    Records are copied through JSON on the way in and out so callers see the
    same isolation they would get from a real store.
    """

    def __init__(self) -> None:
        self.sessions: dict[str, tuple[str, float]] = {}

    async def load(self, session_id: str) -> dict[str, Any] | None:
        entry = self.sessions.get(session_id)
        if entry is None:
            return None
        raw, expires_at = entry
        if expires_at <= time.monotonic():
            del self.sessions[session_id]
            return None
        return json.loads(raw)

    async def save(self, session_id: str, data: dict[str, Any], ttl_seconds: int) -> None:
        self.sessions[session_id] = (json.dumps(data), time.monotonic() + ttl_seconds)

    async def destroy(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.sessions.clear()

    def peek(self, session_id: str) -> dict[str, Any] | None:
        """Read a record without the expiry check (handy in tests)."""
        entry = self.sessions.get(session_id)
        return json.loads(entry[0]) if entry else None
