# =============================================================================
# core/session.py - Session Record and Flash Messages
# =============================================================================
# A SessionRecord ties a cookie to server-side state:
# - passport.user: id of the signed-in user
# - flash: one-shot messages shown on the next rendered page
# - returnTo: where to send the user after signing in
#
# The record itself knows nothing about cookies or stores; the session stage
# loads it, hands it down the pipeline, and saves it when the response is
# ready.
# =============================================================================

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Any, Iterator, MutableMapping


def generate_session_id() -> str:
    return secrets.token_urlsafe(24)


@dataclass
class SessionRecord(MutableMapping[str, Any]):
    """
    Mutable session state for a single client.

    Behaves like a dict. ``is_new`` is True until the record has been
    loaded from a store at least once.
    """
    id: str = field(default_factory=generate_session_id)
    data: dict[str, Any] = field(default_factory=dict)
    is_new: bool = True

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


class Flash:
    """
    One-shot messages grouped by category, stored in the session.

    Example:
        flash = Flash(session)
        flash.add("errors", {"msg": "Invalid email"})
        flash.consume()  # {"errors": [{"msg": "Invalid email"}]}
        flash.consume()  # {}
    """

    KEY = "flash"

    def __init__(self, session: MutableMapping[str, Any]):
        self._session = session

    def add(self, category: str, message: Any) -> None:
        bucket = self._session.setdefault(self.KEY, {})
        bucket.setdefault(category, []).append(message)

    def peek(self, category: str | None = None) -> Any:
        bucket = self._session.get(self.KEY, {})
        if category is None:
            return dict(bucket)
        return list(bucket.get(category, []))

    def consume(self, category: str | None = None) -> Any:
        """Return and remove messages (all categories when none given)."""
        bucket = self._session.get(self.KEY, {})
        if category is None:
            self._session.pop(self.KEY, None)
            return dict(bucket)
        messages = bucket.pop(category, [])
        if not bucket:
            self._session.pop(self.KEY, None)
        return messages
