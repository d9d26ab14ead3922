# =============================================================================
# app/stages/body.py - Body Parsing, Method Override, Cookies
# =============================================================================
# Request-shaping stages that run before the session is attached:
# - parse_body: JSON and URL-encoded form bodies -> ctx.body
# - override_method: POST + X-HTTP-Method-Override re-dispatches with
#   the declared verb (for clients that cannot send PUT/DELETE)
# - parse_cookies: request cookies -> ctx.cookies
#
# Form keys use bracket notation for nesting:
#   user[name]=q&tags[]=a&tags[]=b  ->  {"user": {"name": "q"}, "tags": ["a", "b"]}
# =============================================================================

import logging
import re
from typing import Any, Iterable

from app.exceptions import BadRequestError
from app.pipeline import RequestContext, Stage

logger = logging.getLogger(__name__)

JSON_TYPES = frozenset({"application/json"})
FORM_TYPES = frozenset({"application/x-www-form-urlencoded"})

OVERRIDE_HEADER = "x-http-method-override"
OVERRIDABLE_METHODS = frozenset({"POST"})
KNOWN_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_BRACKET_PART = re.compile(r"\[([^\[\]]*)\]")


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _key_path(key: str) -> list[str]:
    """Split ``user[address][city]`` into ["user", "address", "city"]."""
    match = _BRACKET_KEY.match(key)
    if match is None:
        return [key]
    return [match.group(1)] + _BRACKET_PART.findall(match.group(2))


def _assign(target: dict[str, Any], path: list[str], value: str) -> None:
    name, rest = path[0], path[1:]

    if not rest:
        if name in target:
            existing = target[name]
            target[name] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            target[name] = value
        return

    if rest == [""]:
        bucket = target.get(name)
        if not isinstance(bucket, list):
            bucket = [] if bucket is None else [bucket]
            target[name] = bucket
        bucket.append(value)
        return

    child = target.get(name)
    if not isinstance(child, dict):
        child = {}
        target[name] = child
    _assign(child, rest, value)


def nest_form(items: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """
    Build a nested dict from form items. Repeated keys collect into a list.

    Example:
        nest_form([("tag", "a"), ("tag", "b"), ("user[name]", "x")])
        # {"tag": ["a", "b"], "user": {"name": "x"}}
    """
    form: dict[str, Any] = {}
    for key, value in items:
        _assign(form, _key_path(key), value)
    return form


def parse_body() -> Stage:
    async def stage(ctx: RequestContext):
        media_type = _media_type(ctx.request.headers.get("content-type", ""))
        if media_type not in JSON_TYPES and media_type not in FORM_TYPES:
            return None

        # read once so the body stays available to the route handlers
        if not await ctx.request.body():
            ctx.body = {}
            return None

        if media_type in FORM_TYPES:
            form = await ctx.request.form()
            ctx.body = nest_form(form.multi_items())
            return None

        try:
            ctx.body = await ctx.request.json()
        except ValueError as e:
            raise BadRequestError("Malformed JSON body", details={"error": str(e)}) from e
        return None

    return stage


def override_method() -> Stage:
    async def stage(ctx: RequestContext):
        if ctx.request.method not in OVERRIDABLE_METHODS:
            return None

        declared = ctx.request.headers.get(OVERRIDE_HEADER, "").strip().upper()
        if declared and declared in KNOWN_METHODS:
            logger.debug(f"Method override {ctx.request.method} -> {declared} for {ctx.path}")
            # routing reads the method from the shared ASGI scope
            ctx.request.scope["method"] = declared
        return None

    return stage


def parse_cookies() -> Stage:
    async def stage(ctx: RequestContext):
        ctx.cookies = dict(ctx.request.cookies)
        return None

    return stage
