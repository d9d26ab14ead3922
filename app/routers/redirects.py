# =============================================================================
# app/routers/redirects.py - Legacy URL Redirects
# =============================================================================
# Old links keep working by pointing them at their new homes.
# =============================================================================

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter()

LEGACY_REDIRECTS = {
    "/learn-to-code": "/map",
    "/about": "/field-guide/what-is-free-code-camp",
    "/privacy": "/field-guide/what-is-the-free-code-camp-privacy-policy",
    "/nonprofit-project-instructions": "/field-guide/how-do-free-code-camp-nonprofit-projects-work",
    "/gitter": "https://gitter.im/FreeCodeCamp/FreeCodeCamp",
    "/twitch": "/field-guide/what-is-free-code-camps-twitch-stream",
}


def _add_redirect(source: str, target: str) -> None:
    async def redirect():
        return RedirectResponse(target, status_code=301)

    redirect.__name__ = "redirect_" + source.strip("/").replace("-", "_")
    router.add_api_route(source, redirect, methods=["GET"], include_in_schema=False)


for _source, _target in LEGACY_REDIRECTS.items():
    _add_redirect(_source, _target)
