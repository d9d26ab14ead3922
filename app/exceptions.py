# =============================================================================
# app/exceptions.py - Exceptions and the Terminal Error Responder
# =============================================================================
# Centralized exception handling for the server.
#
# Any exception raised by a pipeline stage or a router ends up in
# respond_to_error(), which:
# - takes the status from the error (status_code or status) or uses 500
# - in development, shows the verbose traceback page
# - otherwise negotiates HTML / JSON / plain text from the Accept header
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.errors import ServerErrorMiddleware
from starlette.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response

from app.pipeline import RequestContext, get_request_context
from core.negotiation import preferred_type
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "opps! Something went wrong. Please try again later"

NEGOTIABLE_TYPES = ("text/html", "application/json", "text/plain")


class CampServerException(ApplicationError):
    """
    Base exception for errors raised while serving a request.

    ``status_code`` is what the terminal error responder answers with.
    """

    def __init__(
        self,
        message: str,
        code: str = "CAMP_SERVER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)
        self.status_code = status_code


class BadRequestError(CampServerException):
    """Raised when the request body cannot be parsed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=400,
            suggestion="Check that the body matches its Content-Type header",
            details=details,
        )


class ForbiddenError(CampServerException):
    """Raised when the current user may not access a resource."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, code="FORBIDDEN", status_code=403)


class LessCompileError(CampServerException):
    """Raised when a LESS stylesheet fails to compile."""

    def __init__(self, source: str, error: str):
        super().__init__(
            message=f"Failed to compile {source}: {error}",
            code="LESS_COMPILE_ERROR",
            status_code=500,
            suggestion="Fix the LESS syntax error and reload the page",
            details={"source": source, "error": error},
        )


# =============================================================================
# Terminal Error Responder
# =============================================================================

def resolve_status(exc: BaseException) -> int:
    """
    Status code for an error: its own status if it has one, else 500.

    Anything below 400 is not an error status and becomes 500.
    """
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    if not isinstance(status, int) or status < 400:
        return 500
    return status


def _verbose_response(ctx: RequestContext, exc: Exception, status: int) -> Response:
    debug_page = ServerErrorMiddleware(ctx.request.app, debug=True)
    response = debug_page.debug_response(ctx.request, exc)
    response.status_code = status
    return response


def _describe(exc: Exception) -> Any:
    if isinstance(exc, ApplicationError):
        return exc.to_dict()
    return str(exc)


async def respond_to_error(ctx: RequestContext, exc: Exception) -> Response:
    """
    Turn an exception into the response the client receives.

    - HTML: flash the error message and redirect to the site root
    - JSON: {"message": ...} with the error status
    - anything else: the message as plain text with the error status
    """
    status = resolve_status(exc)
    where = f"{ctx.request.method} {ctx.path}"

    if ctx.config.verbose_errors:
        logger.error(f"{where} failed: {_describe(exc)}", exc_info=exc)
        return _verbose_response(ctx, exc, status)

    if status >= 500:
        logger.error(f"Unexpected error on {where}: {_describe(exc)}", exc_info=exc)
    else:
        logger.info(f"{where} failed with {status}: {_describe(exc)}")

    kind = preferred_type(ctx.request.headers.get("accept"), NEGOTIABLE_TYPES)

    if kind == "text/html":
        ctx.flash("errors", {"msg": ERROR_MESSAGE})
        return RedirectResponse("/", status_code=302)

    if kind == "application/json":
        return JSONResponse({"message": ERROR_MESSAGE}, status_code=status)

    return PlainTextResponse(ERROR_MESSAGE, status_code=status)


def _raised_by_routing(request: Request, exc: StarletteHTTPException) -> bool:
    # The router adds "endpoint" to the scope once a path matches; a 405
    # always comes from a path match with the wrong method.
    if exc.status_code == 405:
        return True
    return exc.status_code == 404 and "endpoint" not in request.scope


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Route HTTPExceptions to the terminal responder.

    A 404 for a path no router knows and a 405 for the wrong method keep
    FastAPI's default answer. A 404 raised by a handler that did match is
    an ordinary error and gets the negotiated message.
    """
    if _raised_by_routing(request, exc):
        return await http_exception_handler(request, exc)

    try:
        ctx = get_request_context(request)
    except LookupError:
        return await http_exception_handler(request, exc)
    return await respond_to_error(ctx, exc)
