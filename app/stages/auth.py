# =============================================================================
# app/stages/auth.py - Identity Restoration
# =============================================================================
# restore_user turns the id stored in the session back into a user through
# the injected UserLoader. expose_user makes the result available to
# templates.
# =============================================================================

import logging

from app.auth.session import PASSPORT_KEY, session_user_id
from app.pipeline import RequestContext, Stage
from lib.user_store import UserLoader

logger = logging.getLogger(__name__)


def restore_user(user_loader: UserLoader) -> Stage:
    async def stage(ctx: RequestContext):
        ctx.user = None
        if ctx.session is None:
            return None

        user_id = session_user_id(ctx.session)
        if user_id is None:
            return None

        user = await user_loader.load_user(user_id)
        if user is None:
            # the account is gone; forget it so the session reads as anonymous
            logger.info(f"Session {ctx.session.id} refers to unknown user {user_id}")
            ctx.session[PASSPORT_KEY].pop("user", None)
            return None

        ctx.user = user
        return None

    return stage


def expose_user() -> Stage:
    async def stage(ctx: RequestContext):
        ctx.template_context["user"] = ctx.user
        return None

    return stage
