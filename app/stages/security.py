# =============================================================================
# app/stages/security.py - Response Security Headers
# =============================================================================
# Header stages. Each one only records what the final response should carry;
# PipelineMiddleware applies it when the response is ready.
# =============================================================================

from app.pipeline import RequestContext, Stage
from core.csp import ContentSecurityPolicy

CORS_ALLOW_HEADERS = "Origin, X-Requested-With, Content-Type, Accept"


def hide_powered_by() -> Stage:
    async def stage(ctx: RequestContext):
        ctx.stripped_headers.add("x-powered-by")
        return None

    return stage


def security_headers(frame_options: str = "SAMEORIGIN") -> Stage:
    """nosniff, the XSS filter, and frame-embedding protection."""

    async def stage(ctx: RequestContext):
        ctx.response_headers["X-XSS-Protection"] = "1; mode=block"
        ctx.response_headers["X-Content-Type-Options"] = "nosniff"
        ctx.response_headers["X-Frame-Options"] = frame_options
        return None

    return stage


def cors_headers() -> Stage:
    async def stage(ctx: RequestContext):
        ctx.response_headers["Access-Control-Allow-Origin"] = "*"
        ctx.response_headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        return None

    return stage


def content_security_policy(policy: ContentSecurityPolicy) -> Stage:
    # the policy is fixed for the life of the process
    name, value = policy.header_name, policy.header_value()

    async def stage(ctx: RequestContext):
        ctx.response_headers[name] = value
        return None

    return stage
