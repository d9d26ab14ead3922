# =============================================================================
# app/routers/home.py - Landing Page
# =============================================================================

from fastapi import APIRouter, Request

from app.templating import render

router = APIRouter()


@router.get("/")
async def index(request: Request):
    """Landing page; signed-in users see a link to their account."""
    return render(request, "home.html", {"title": "Learn to code and help nonprofits"})
