# =============================================================================
# app/routers/challenge_map.py - Challenge Map
# =============================================================================

from fastapi import APIRouter, Request

from app.templating import render

router = APIRouter()


@router.get("/map")
async def challenge_map(request: Request):
    return render(request, "page.html", {"title": "Map", "section": "Challenges"})
