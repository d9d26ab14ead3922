# =============================================================================
# app/routers/user.py - Accounts and Public Profiles
# =============================================================================
# Mounted last: /{username} matches any single-segment path, so every other
# router must get the chance to answer first.
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from app.dependencies import ContextDep
from app.templating import render

router = APIRouter()


@router.get("/account")
async def account(request: Request, ctx: ContextDep):
    if ctx.user is None:
        ctx.flash("errors", {"msg": "You must be signed in to see your account."})
        return RedirectResponse("/signin", status_code=302)
    return render(request, "page.html", {"title": "Account", "section": ctx.user.username or ctx.user.id})


@router.get("/{username}")
async def public_profile(request: Request, username: str):
    return render(request, "page.html", {"title": username, "section": "Portfolio"})
