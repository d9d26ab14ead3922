# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Builds apps from an explicit PipelineConfig with in-memory stores
# - Provides a probe router whose routes exercise the pipeline
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("NODE_ENV", "test")
os.environ.setdefault("DATABASE_URL", "memory://")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-0123456789")

import pytest
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from app.assembler import create_app
from app.auth.models import AuthUser
from app.auth.session import login
from app.config import PipelineConfig
from app.dependencies import ContextDep
from app.exceptions import ForbiddenError
from app.stages.session import session_signer, unsign_session_id
from lib.session_store import MemorySessionStore
from lib.user_store import MemoryUserStore


# =============================================================================
# Helpers
# =============================================================================

class StatusError(Exception):
    """Error carrying a bare ``status`` attribute."""

    def __init__(self, status: int):
        super().__init__(f"status {status}")
        self.status = status


def read_session(client: TestClient, store: MemorySessionStore, config: PipelineConfig):
    """Return the stored session data for the client's session cookie."""
    cookie = client.cookies.get(config.session_cookie_name)
    if cookie is None:
        return None
    session_id = unsign_session_id(session_signer(config.session_secret), cookie)
    return store.peek(session_id) if session_id else None


def build_probe_router() -> APIRouter:
    router = APIRouter()

    @router.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    @router.get("/forbidden")
    async def forbidden():
        raise ForbiddenError()

    @router.get("/status-403")
    async def status_403():
        raise StatusError(403)

    @router.get("/http-403")
    async def http_403():
        raise HTTPException(status_code=403, detail="nope")

    @router.get("/missing-story")
    async def missing_story():
        raise HTTPException(status_code=404, detail="no story")

    @router.get("/powered")
    async def powered():
        return PlainTextResponse("ok", headers={"X-Powered-By": "Express"})

    @router.get("/context")
    async def context(ctx: ContextDep):
        return {
            "user": ctx.user.username if ctx.user else None,
            "template_user": getattr(ctx.template_context.get("user"), "username", None),
            "cookies": sorted(ctx.cookies),
            "has_validator": ctx.validator is not None,
        }

    @router.post("/echo")
    async def echo(ctx: ContextDep):
        return {"body": ctx.body, "method": ctx.request.method}

    @router.post("/validate")
    async def validate(ctx: ContextDep):
        ctx.validator.check_body("email", "Please enter a valid email").is_email()
        ctx.validator.check_body("username", "Lowercase letters only").match_regex(r"^[a-z]+$")
        return {"errors": ctx.validator.errors()}

    @router.delete("/items/{item_id}")
    async def delete_item(item_id: str, ctx: ContextDep):
        return {"deleted": item_id, "original_method": ctx.original_method}

    @router.post("/login/{user_id}")
    async def do_login(user_id: str, request: Request, ctx: ContextDep):
        user = await request.app.state.user_loader.load_user(user_id)
        if user is None:
            raise HTTPException(status_code=403, detail="unknown user")
        login(ctx, user)
        return {"ok": True}

    return router


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def public_dir(tmp_path):
    path = tmp_path / "public"
    path.mkdir()
    return path.resolve()


@pytest.fixture
def config(public_dir) -> PipelineConfig:
    """Non-production configuration with a scratch public directory."""
    return PipelineConfig(
        environment="test",
        session_secret="test-session-secret-0123456789",
        public_dir=public_dir,
    )


@pytest.fixture
def production_config(config) -> PipelineConfig:
    return config.model_copy(update={
        "environment": "production",
        "is_production": True,
        "canonical_host": "www.freecodecamp.com",
    })


@pytest.fixture
def session_store():
    return MemorySessionStore()


@pytest.fixture
def camper():
    return AuthUser(id="camper-1", username="quincy", email="quincy@example.com")


@pytest.fixture
def user_store(camper):
    return MemoryUserStore([camper])


@pytest.fixture
def probe_router():
    return build_probe_router()


@pytest.fixture
def make_app(config, session_store, user_store, probe_router):
    """Factory for apps; defaults to the probe router only."""

    def factory(config_override=None, routers=None):
        return create_app(
            config_override or config,
            session_store=session_store,
            user_loader=user_store,
            routers=[probe_router] if routers is None else routers,
        )

    return factory


@pytest.fixture
def client(make_app):
    return TestClient(make_app())
