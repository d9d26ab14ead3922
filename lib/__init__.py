# =============================================================================
# lib/ - External Store Clients
# =============================================================================
# This package contains clients for the stores the server talks to:
# - session_store.py: Durable session records (Redis, in-memory)
# - user_store.py: User lookup used to restore identity from a session
# - utils.py: Shared utilities (base error class, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.session_store import (
    MemorySessionStore,
    RedisSessionStore,
    SessionStore,
    SessionStoreError,
)
from lib.utils import ApplicationError, utc_timestamp

__all__ = [
    # Sessions
    "SessionStore",
    "RedisSessionStore",
    "MemorySessionStore",
    "SessionStoreError",
    # Utils
    "ApplicationError",
    "utc_timestamp",
]
