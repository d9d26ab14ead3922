# =============================================================================
# app/auth/session.py - Session-Based Identity
# =============================================================================
# Only the user id is kept in the session, under passport.user. These
# helpers are what sign-in and sign-out handlers call; restoring the user
# on later requests is done by the auth stage.
# =============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING, MutableMapping, Optional

from starlette.responses import RedirectResponse

from app.auth.models import AuthUser
from core.navigation import RETURN_TO_KEY

if TYPE_CHECKING:
    from app.pipeline import RequestContext

PASSPORT_KEY = "passport"


def session_user_id(session: MutableMapping) -> Optional[str]:
    passport = session.get(PASSPORT_KEY)
    if isinstance(passport, dict):
        user_id = passport.get("user")
        return str(user_id) if user_id else None
    return None


def login(ctx: RequestContext, user: AuthUser) -> None:
    """
    Sign ``user`` in for the rest of this session.

    Raises:
        RuntimeError: If the request has no session
    """
    if ctx.session is None:
        raise RuntimeError("login() requires the session stage")
    ctx.session[PASSPORT_KEY] = {"user": user.id}
    ctx.user = user
    ctx.template_context["user"] = user


def logout(ctx: RequestContext) -> None:
    if ctx.session is not None:
        passport = ctx.session.get(PASSPORT_KEY)
        if isinstance(passport, dict):
            passport.pop("user", None)
    ctx.user = None
    ctx.template_context["user"] = None


def redirect_after_login(ctx: RequestContext, default: str = "/") -> RedirectResponse:
    """Send the user back to the page they were on before signing in."""
    target = default
    if ctx.session is not None:
        target = ctx.session.pop(RETURN_TO_KEY, default) or default
    return RedirectResponse(target, status_code=302)
