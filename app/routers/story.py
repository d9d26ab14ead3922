# =============================================================================
# app/routers/story.py - Camper News
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from app.dependencies import ContextDep
from app.templating import render

router = APIRouter()


@router.get("/stories")
async def stories(request: Request):
    return render(request, "page.html", {"title": "Camper News", "section": "Stories"})


@router.get("/stories/comments/{comment_id}")
async def story_comment(comment_id: str):
    """Comment fragments are fetched by scripts on a story page."""
    return {"id": comment_id, "comments": []}


@router.get("/stories/search")
async def search_stories(request: Request, ctx: ContextDep):
    """
    Search Camper News by the ``q`` query parameter.

    An empty search goes back to the story list with the validation
    message flashed.
    """
    ctx.validator.check_query("q", "Please enter a search term").not_empty()
    errors = ctx.validator.errors()
    if errors:
        for error in errors:
            ctx.flash("errors", error)
        return RedirectResponse("/stories", status_code=302)

    query = request.query_params["q"].strip()
    return render(request, "page.html", {"title": f"Stories about {query}", "section": "Stories"})


# Registered after the fixed /stories/* paths so it does not shadow them
@router.get("/stories/{slug}")
async def show_story(request: Request, slug: str):
    return render(request, "page.html", {"title": slug.replace("-", " "), "section": "Stories"})
