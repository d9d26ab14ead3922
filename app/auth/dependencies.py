# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for the user the pipeline restored from the
# session.
#
# Usage:
#   from app.auth.dependencies import get_current_user
#
#   @router.get("/account")
#   async def account(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status

from app.auth.models import AuthUser
from app.dependencies import get_context
from app.pipeline import RequestContext

logger = logging.getLogger(__name__)


async def get_current_user_optional(
    ctx: RequestContext = Depends(get_context),
) -> Optional[AuthUser]:
    """
    The signed-in user, or None for anonymous visitors.

    Usage:
        @router.get("/public-or-private")
        async def flexible_route(user: AuthUser | None = Depends(get_current_user_optional)):
            if user:
                return {"user_id": user.id}
            return {"message": "anonymous access"}
    """
    return ctx.user


async def get_current_user(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
) -> AuthUser:
    """
    The signed-in user.

    Raises:
        HTTPException: 401 if nobody is signed in
    """
    if user is None:
        logger.debug("Rejecting anonymous request to a protected route")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required",
        )
    return user
