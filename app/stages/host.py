# =============================================================================
# app/stages/host.py - Canonical Host Redirect
# =============================================================================
# In production every request must arrive on one hostname. Anything else is
# permanently redirected to the same path and query on the canonical host.
# =============================================================================

import logging

from starlette.responses import RedirectResponse

from app.pipeline import RequestContext, Stage

logger = logging.getLogger(__name__)


def force_domain(hostname: str) -> Stage:
    """
    Build the canonical-host stage.

    Args:
        hostname: Host every request should use, e.g. "www.freecodecamp.com"
    """
    canonical = hostname.lower()

    async def stage(ctx: RequestContext):
        host = (ctx.request.url.hostname or "").lower()
        if host == canonical:
            return None

        target = str(ctx.request.url.replace(netloc=canonical))
        logger.debug(f"Redirecting {host or '<no host>'} to {target}")
        return RedirectResponse(target, status_code=301)

    return stage
