# =============================================================================
# app/assembler.py - Pipeline Assembly
# =============================================================================
# Builds the FastAPI application from explicit inputs:
# - a PipelineConfig resolved once at startup
# - a session store and a user loader (injected capabilities)
# - the routers to mount, in order
#
# Request processing order (each step may rely on state set by an earlier
# one, so the order is part of the contract):
#
#    0. canonical host redirect (production only)
#    1. response compression (GZip, wraps everything below)
#    2. LESS preprocessing          10. flash messages
#    3. request logging             11. X-Powered-By removal
#    4. body parsing                12. security headers
#    5. validator                   13. CORS headers
#    6. method override             14. Content-Security-Policy
#    7. cookie parsing              15. user exposed to templates
#    8. session                     16. static files
#    9. identity restoration        17. return-to capture
#   18. routers, first match wins
#   19. terminal error responder
# =============================================================================

import logging
from typing import Any, Callable, Optional, Sequence

from fastapi import APIRouter, FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from app.config import PipelineConfig
from app.exceptions import handle_http_exception, respond_to_error
from app.pipeline import NamedStage, Pipeline, PipelineMiddleware
from app.routers import default_routers
from app.stages.assets import compile_less, serve_static
from app.stages.auth import expose_user, restore_user
from app.stages.body import override_method, parse_body, parse_cookies
from app.stages.host import force_domain
from app.stages.navigation import remember_return_to
from app.stages.request_log import log_requests
from app.stages.security import (
    content_security_policy,
    cors_headers,
    hide_powered_by,
    security_headers,
)
from app.stages.session import attach_flash, attach_session
from app.stages.validation import attach_validator
from app.templating import create_templates
from core.csp import ContentSecurityPolicy, build_policy
from lib.session_store import SessionStore
from lib.user_store import UserLoader

logger = logging.getLogger(__name__)


def build_pipeline(
    config: PipelineConfig,
    session_store: SessionStore,
    user_loader: UserLoader,
    policy: Optional[ContentSecurityPolicy] = None,
) -> Pipeline:
    """
    Compose the request stages in their fixed order.

    Args:
        config: Resolved pipeline configuration
        session_store: Store backing the session stage
        user_loader: Resolves session user ids to users
        policy: Content-Security-Policy (defaults to the trusted origins policy)

    Returns:
        Pipeline whose ``names`` list the stages in execution order
    """
    policy = policy or build_policy(report_only=config.csp_report_only)

    stages: list[NamedStage] = []
    if config.canonical_host:
        stages.append(NamedStage("canonical_host", force_domain(config.canonical_host)))

    stages.extend([
        NamedStage("less", compile_less(config.public_dir)),
        NamedStage("logger", log_requests()),
        NamedStage("body_parser", parse_body()),
        NamedStage("validator", attach_validator()),
        NamedStage("method_override", override_method()),
        NamedStage("cookie_parser", parse_cookies()),
        NamedStage(
            "session",
            attach_session(
                session_store,
                secret=config.session_secret,
                cookie_name=config.session_cookie_name,
                ttl_seconds=config.session_ttl_seconds,
            ),
        ),
        NamedStage("auth", restore_user(user_loader)),
        NamedStage("flash", attach_flash()),
        NamedStage("powered_by", hide_powered_by()),
        NamedStage("security_headers", security_headers()),
        NamedStage("cors", cors_headers()),
        NamedStage("csp", content_security_policy(policy)),
        NamedStage("locals", expose_user()),
        NamedStage("static", serve_static(config.public_dir, config.static_max_age_seconds)),
        NamedStage("return_to", remember_return_to()),
    ])
    return Pipeline(stages)


def create_app(
    config: PipelineConfig,
    *,
    session_store: SessionStore,
    user_loader: UserLoader,
    routers: Optional[Sequence[APIRouter]] = None,
    lifespan: Optional[Callable[[FastAPI], Any]] = None,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        config: Resolved pipeline configuration
        session_store: Durable session store
        user_loader: Resolves session user ids to users
        routers: Routers to mount, in order (defaults to the site routers)
        lifespan: Optional startup/shutdown handler

    Returns:
        FastAPI application ready to be served
    """
    app = FastAPI(
        title="Camp Server",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    pipeline = build_pipeline(config, session_store, user_loader)

    app.state.config = config
    app.state.session_store = session_store
    app.state.user_loader = user_loader
    app.state.pipeline = pipeline
    app.state.templates = create_templates(config.views_dir, config.view_engine)

    # -------------------------------------------------------------------------
    # Routers (first match wins, in mount order)
    # -------------------------------------------------------------------------
    for router in default_routers() if routers is None else routers:
        app.include_router(router)

    # -------------------------------------------------------------------------
    # Error handling
    # -------------------------------------------------------------------------
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)

    # -------------------------------------------------------------------------
    # Middleware (last added runs first)
    # -------------------------------------------------------------------------
    app.add_middleware(
        PipelineMiddleware,
        pipeline=pipeline,
        config=config,
        error_responder=respond_to_error,
    )
    app.add_middleware(GZipMiddleware, minimum_size=config.gzip_minimum_size)

    logger.info(f"Assembled pipeline: {' -> '.join(pipeline.names)}")
    return app
