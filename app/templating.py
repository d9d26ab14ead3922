# =============================================================================
# app/templating.py - View Rendering
# =============================================================================
# Jinja2 views live in app/views. Every render gets the values the pipeline
# exposed (the current user) plus any flash messages waiting in the session,
# which are consumed by the render.
# =============================================================================

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from app.pipeline import get_request_context


SUPPORTED_ENGINES = frozenset({"jinja2"})


def create_templates(views_dir: Path, engine: str = "jinja2") -> Jinja2Templates:
    if engine not in SUPPORTED_ENGINES:
        raise ValueError(f"Unsupported view engine: {engine}")
    return Jinja2Templates(directory=str(views_dir))


def render(
    request: Request,
    template: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> Response:
    """
    Render a view with the pipeline's template context.

    Args:
        request: Current request
        template: Template file name relative to the views directory
        context: View-specific values
        status_code: Response status
    """
    ctx = get_request_context(request)
    values: dict[str, Any] = dict(ctx.template_context)
    values["messages"] = ctx.consume_flashes()
    values.update(context or {})

    templates: Jinja2Templates = request.app.state.templates
    return templates.TemplateResponse(request, template, values, status_code=status_code)
