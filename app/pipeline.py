# =============================================================================
# app/pipeline.py - Request Pipeline Execution
# =============================================================================
# The request pipeline is an explicit, ordered list of named stages.
#
# Each stage is an async callable that receives the per-request
# RequestContext and returns either:
# - None: continue with the next stage
# - a Response: short-circuit, later stages and the routers are skipped
#
# Stages that need to act on the final response (logging, session saving)
# register a response hook on the context. Stages that add headers put them
# in ctx.response_headers; they are applied to whatever response the request
# ends up with, so a short-circuit only carries headers from earlier stages.
#
# PipelineMiddleware runs the pipeline in front of the FastAPI router and
# hands any exception to the terminal error responder.
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.auth.models import AuthUser
from app.config import PipelineConfig
from core.session import Flash, SessionRecord
from core.validation import RequestValidator

logger = logging.getLogger(__name__)

ResponseHook = Callable[["RequestContext", Response], Awaitable[None]]
Stage = Callable[["RequestContext"], Awaitable[Optional[Response]]]
ErrorResponder = Callable[["RequestContext", Exception], Awaitable[Response]]


@dataclass
class RequestContext:
    """
    Per-request state passed explicitly through every stage.

    Attributes:
        request: The incoming Starlette request
        config: Pipeline configuration resolved at startup
        original_method: Method before any override
        body: Parsed request body (dict for forms and JSON objects)
        cookies: Parsed request cookies
        validator: Request validator, set by the validator stage
        session: Session record, set by the session stage
        user: Signed-in user restored from the session
        flashes: Flash messages bound to the session
        response_headers: Headers added to the final response
        stripped_headers: Headers removed from the final response
        template_context: Values exposed to every rendered template
    """
    request: Request
    config: PipelineConfig
    started_at: float = field(default_factory=time.perf_counter)
    original_method: str = ""
    body: Any = None
    cookies: dict[str, str] = field(default_factory=dict)
    validator: Optional[RequestValidator] = None
    session: Optional[SessionRecord] = None
    user: Optional[AuthUser] = None
    flashes: Optional[Flash] = None
    response_headers: dict[str, str] = field(default_factory=dict)
    stripped_headers: set[str] = field(default_factory=set)
    template_context: dict[str, Any] = field(default_factory=dict)
    response_hooks: list[ResponseHook] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.original_method:
            self.original_method = self.request.method

    @property
    def path(self) -> str:
        return self.request.url.path

    def on_response(self, hook: ResponseHook) -> None:
        """Run ``hook`` once the response for this request is known."""
        self.response_hooks.append(hook)

    def flash(self, category: str, message: Any) -> None:
        """Queue a one-shot message for the next rendered page."""
        if self.flashes is None:
            logger.warning(f"Dropping flash message, no session for {self.path}")
            return
        self.flashes.add(category, message)

    def consume_flashes(self) -> dict[str, list[Any]]:
        return self.flashes.consume() if self.flashes is not None else {}


@dataclass(frozen=True)
class NamedStage:
    name: str
    handler: Stage


class Pipeline:
    """
    Ordered composition of stages.

    Example:
        pipeline = Pipeline([
            NamedStage("logger", log_requests()),
            NamedStage("session", attach_session(store, ...)),
        ])
        response = await pipeline.run(ctx)  # None means dispatch to routers
    """

    def __init__(self, stages: Sequence[NamedStage]):
        self._stages = tuple(stages)

    @property
    def names(self) -> list[str]:
        return [stage.name for stage in self._stages]

    @property
    def stages(self) -> tuple[NamedStage, ...]:
        return self._stages

    async def run(self, ctx: RequestContext) -> Optional[Response]:
        for stage in self._stages:
            response = await stage.handler(ctx)
            if response is not None:
                logger.debug(f"Stage '{stage.name}' answered {ctx.path}")
                return response
        return None

    async def finalize(
        self,
        ctx: RequestContext,
        response: Response,
        error_responder: ErrorResponder,
    ) -> Response:
        """
        Run response hooks (last registered first) and apply headers.

        A failing hook replaces the response with the error responder's
        answer; the remaining hooks then see the replacement.
        """
        for hook in reversed(ctx.response_hooks):
            try:
                await hook(ctx, response)
            except Exception as exc:
                logger.exception(f"Response hook failed for {ctx.path}: {exc}")
                response = await error_responder(ctx, exc)

        for name, value in ctx.response_headers.items():
            response.headers[name] = value
        for name in ctx.stripped_headers:
            if name in response.headers:
                del response.headers[name]
        return response


class PipelineMiddleware(BaseHTTPMiddleware):
    """
    Runs the pipeline before the routers.

    The RequestContext is stored on ``request.state.context`` so route
    handlers and exception handlers further down can reach it.
    """

    def __init__(
        self,
        app: ASGIApp,
        pipeline: Pipeline,
        config: PipelineConfig,
        error_responder: ErrorResponder,
    ):
        super().__init__(app)
        self.pipeline = pipeline
        self.config = config
        self.error_responder = error_responder

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        ctx = RequestContext(request=request, config=self.config)
        request.state.context = ctx

        try:
            response = await self.pipeline.run(ctx)
            if response is None:
                response = await call_next(request)
        except Exception as exc:
            response = await self.error_responder(ctx, exc)

        return await self.pipeline.finalize(ctx, response, self.error_responder)


def get_request_context(request: Request) -> RequestContext:
    """
    Fetch the context the pipeline attached to ``request``.

    Raises:
        LookupError: If the request did not go through the pipeline
    """
    ctx = getattr(request.state, "context", None)
    if ctx is None:
        raise LookupError("Request did not pass through PipelineMiddleware")
    return ctx
