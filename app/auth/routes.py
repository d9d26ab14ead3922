# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-in pages and session endpoints.
#
# Note: Provider strategies (GitHub, Twitter, email) plug in behind /auth/*.
# These routes cover what the server itself owns: the sign-in page,
# signing out, and reporting who is signed in.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from app.auth.session import logout, redirect_after_login
from app.dependencies import ContextDep
from app.templating import render

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/signin")
async def signin(request: Request, ctx: ContextDep):
    if ctx.user is not None:
        return redirect_after_login(ctx)
    return render(request, "signin.html", {"title": "Sign in"})


@router.get("/signup")
async def signup():
    return RedirectResponse("/signin", status_code=302)


@router.get("/logout")
async def signout(ctx: ContextDep):
    if ctx.user is not None:
        logger.info(f"User {ctx.user.id} signed out")
    logout(ctx)
    ctx.flash("info", {"msg": "You have been signed out."})
    return RedirectResponse("/", status_code=302)


@router.get("/auth/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current signed-in user's profile.

    Raises:
        401: If not signed in
    """
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        display_name=user.display_name,
    )
