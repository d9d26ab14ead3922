# =============================================================================
# app/stages/assets.py - Stylesheets and Static Files
# =============================================================================
# Two stages work on the public directory:
# - compile_less: when a .css file is requested and a newer .less source
#   sits next to it, compile it with lesscpy before anything serves it
# - serve_static: answer requests for existing files with a long-lived
#   Cache-Control header; everything else falls through to the routers
# =============================================================================

import logging
import os
from pathlib import Path

import lesscpy
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from app.exceptions import LessCompileError
from app.pipeline import RequestContext, Stage

logger = logging.getLogger(__name__)

READ_METHODS = frozenset({"GET", "HEAD"})


def _relative_path(url_path: str) -> str | None:
    relative = url_path.lstrip("/")
    if not relative:
        return None
    return os.path.normpath(relative)


# =============================================================================
# LESS Preprocessing
# =============================================================================

def _stylesheet_sources(public_dir: Path, url_path: str) -> tuple[Path, Path] | None:
    """Map ``/css/main.css`` to (public/css/main.less, public/css/main.css)."""
    relative = _relative_path(url_path)
    if relative is None or not relative.endswith(".css"):
        return None

    root = public_dir.resolve()
    css_path = (root / relative).resolve()
    if root not in css_path.parents:
        return None
    return css_path.with_suffix(".less"), css_path


def _needs_compile(less_path: Path, css_path: Path) -> bool:
    if not less_path.is_file():
        return False
    if not css_path.exists():
        return True
    return less_path.stat().st_mtime > css_path.stat().st_mtime


def _compile(less_path: Path, css_path: Path) -> None:
    try:
        with less_path.open("r", encoding="utf-8") as source:
            css = lesscpy.compile(source)
    except Exception as e:
        raise LessCompileError(str(less_path), str(e)) from e

    css_path.write_text(css, encoding="utf-8")
    logger.info(f"Compiled {less_path.name} -> {css_path.name}")


def compile_less(public_dir: Path) -> Stage:
    """Build the stylesheet preprocessing stage."""

    async def stage(ctx: RequestContext):
        if ctx.request.method not in READ_METHODS:
            return None

        sources = _stylesheet_sources(public_dir, ctx.path)
        if sources is None:
            return None

        less_path, css_path = sources
        if await run_in_threadpool(_needs_compile, less_path, css_path):
            await run_in_threadpool(_compile, less_path, css_path)
        return None

    return stage


# =============================================================================
# Static Files
# =============================================================================

class CachedStaticFiles(StaticFiles):
    """StaticFiles with a Cache-Control header on every file response."""

    def __init__(self, *, directory: Path, max_age_seconds: int):
        super().__init__(directory=directory, check_dir=False)
        self.max_age_seconds = max_age_seconds

    def file_response(self, full_path, stat_result, scope: Scope, status_code: int = 200) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        response.headers["Cache-Control"] = f"public, max-age={self.max_age_seconds}"
        return response


def serve_static(public_dir: Path, max_age_seconds: int) -> Stage:
    """
    Build the static file stage.

    Args:
        public_dir: Directory to serve
        max_age_seconds: Cache lifetime advertised to clients
    """
    files = CachedStaticFiles(directory=public_dir, max_age_seconds=max_age_seconds)

    async def stage(ctx: RequestContext):
        if ctx.request.method not in READ_METHODS:
            return None

        relative = _relative_path(ctx.path)
        if relative is None:
            return None

        full_path, stat_result = await run_in_threadpool(files.lookup_path, relative)
        if stat_result is None or not os.path.isfile(full_path):
            return None

        return files.file_response(full_path, stat_result, ctx.request.scope)

    return stage
