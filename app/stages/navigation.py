# =============================================================================
# app/stages/navigation.py - Return-To Capture
# =============================================================================
# Remembers the current path in the session so signing in can bring the
# user back to it. Auth pages, assets and comment fragments are skipped.
# =============================================================================

from app.pipeline import RequestContext, Stage
from core.navigation import RETURN_TO_KEY, should_remember


def remember_return_to() -> Stage:
    async def stage(ctx: RequestContext):
        if ctx.session is not None and should_remember(ctx.path):
            ctx.session[RETURN_TO_KEY] = ctx.path
        return None

    return stage
