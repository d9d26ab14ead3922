# =============================================================================
# app/routers/field_guide.py - Field Guide
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from app.templating import render

router = APIRouter()

DEFAULT_ARTICLE = "how-do-i-use-this-guide"


def _title(slug: str) -> str:
    return slug.replace("-", " ").capitalize()


@router.get("/field-guide")
async def field_guide_index():
    return RedirectResponse(f"/field-guide/{DEFAULT_ARTICLE}", status_code=302)


@router.get("/field-guide/{article}")
async def field_guide_article(request: Request, article: str):
    return render(request, "page.html", {"title": _title(article), "section": "Field Guide"})
