# =============================================================================
# app/stages/request_log.py - Request Logging
# =============================================================================
# One log line per request once the response is known:
#   GET /map 200 4.213 ms - 5120
# =============================================================================

import logging
import time

from starlette.responses import Response

from app.pipeline import RequestContext, Stage

request_logger = logging.getLogger("camp.request")


def log_requests() -> Stage:
    async def write_line(ctx: RequestContext, response: Response) -> None:
        elapsed_ms = (time.perf_counter() - ctx.started_at) * 1000
        request_logger.info(
            "%s %s %d %.3f ms - %s",
            ctx.original_method,
            ctx.path,
            response.status_code,
            elapsed_ms,
            response.headers.get("content-length", "-"),
        )

    async def stage(ctx: RequestContext):
        ctx.started_at = time.perf_counter()
        ctx.on_response(write_line)
        return None

    return stage
