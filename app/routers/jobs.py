# =============================================================================
# app/routers/jobs.py - Job Board
# =============================================================================

from fastapi import APIRouter, Request

from app.templating import render

router = APIRouter()


@router.get("/jobs")
async def jobs(request: Request):
    return render(request, "page.html", {"title": "Jobs", "section": "Jobs"})
