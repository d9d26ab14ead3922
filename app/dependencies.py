# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for per-request and app-wide resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.pipeline import RequestContext, get_request_context
from lib.session_store import SessionStore


def get_context(request: Request) -> RequestContext:
    """The RequestContext built by the pipeline for this request."""
    return get_request_context(request)


def get_session_store(request: Request) -> SessionStore:
    """The session store the app was assembled with."""
    return request.app.state.session_store


# Type aliases for dependency injection
ContextDep = Annotated[RequestContext, Depends(get_context)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
