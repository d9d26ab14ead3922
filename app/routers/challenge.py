# =============================================================================
# app/routers/challenge.py - Challenges
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from app.templating import render

router = APIRouter()


@router.get("/challenges")
async def challenges_index():
    return RedirectResponse("/map", status_code=302)


@router.get("/challenges/{challenge_name}")
async def show_challenge(request: Request, challenge_name: str):
    title = challenge_name.replace("-", " ")
    return render(request, "page.html", {"title": title, "section": "Challenges"})
