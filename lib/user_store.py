# =============================================================================
# lib/user_store.py - User Lookup for Session Restoration
# =============================================================================
# The auth stage stores only a user id in the session and asks a UserLoader
# to turn it back into a user on every request (deserialization).
#
# Usage:
#   from lib.user_store import RedisUserStore
#   users = RedisUserStore(redis_client)
#   user = await users.load_user("5f1c...")
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Protocol

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.auth.models import AuthUser
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class UserStoreError(ApplicationError):
    """Raised when a user record cannot be read or written."""

    def __init__(self, message: str):
        super().__init__(
            message,
            code="USER_STORE_ERROR",
            suggestion="Check that the database is running and DATABASE_URL is correct",
        )


class UserLoader(Protocol):
    async def load_user(self, user_id: str) -> AuthUser | None: ...


class RedisUserStore:
    """Users stored as JSON documents under ``<prefix><id>``."""

    def __init__(self, client: Redis, prefix: str = "user:"):
        self._client = client
        self._prefix = prefix

    async def load_user(self, user_id: str) -> AuthUser | None:
        try:
            raw = await self._client.get(f"{self._prefix}{user_id}")
        except RedisError as e:
            raise UserStoreError(f"Failed to load user {user_id}: {e}") from e

        if raw is None:
            return None

        try:
            return AuthUser(**json.loads(raw))
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed user record {user_id}: {e}")
            return None

    async def save_user(self, user: AuthUser) -> None:
        try:
            await self._client.set(f"{self._prefix}{user.id}", user.model_dump_json())
        except RedisError as e:
            raise UserStoreError(f"Failed to save user {user.id}: {e}") from e


class MemoryUserStore:
    """Process-local user store for development and tests."""

    def __init__(self, users: list[AuthUser] | None = None):
        self.users: dict[str, AuthUser] = {user.id: user for user in users or []}

    async def load_user(self, user_id: str) -> AuthUser | None:
        return self.users.get(user_id)

    async def save_user(self, user: AuthUser) -> None:
        self.users[user.id] = user
