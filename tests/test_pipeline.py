# =============================================================================
# tests/test_pipeline.py - Pipeline Composition Tests
# =============================================================================
# Covers stage ordering, short-circuiting and response finalization on a
# bare RequestContext, plus the stage list the assembler produces.
# =============================================================================

import asyncio

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from app.assembler import build_pipeline
from app.pipeline import NamedStage, Pipeline, RequestContext, get_request_context

BASE_STAGES = [
    "less",
    "logger",
    "body_parser",
    "validator",
    "method_override",
    "cookie_parser",
    "session",
    "auth",
    "flash",
    "powered_by",
    "security_headers",
    "cors",
    "csp",
    "locals",
    "static",
    "return_to",
]


def make_context(config, path="/x", method="GET") -> RequestContext:
    request = Request({
        "type": "http",
        "method": method,
        "path": path,
        "headers": [],
        "query_string": b"",
    })
    return RequestContext(request=request, config=config)


def recording_stage(name, calls, response=None):
    async def stage(ctx):
        calls.append(name)
        return response

    return NamedStage(name, stage)


async def failing_responder(ctx, exc):
    return PlainTextResponse(f"handled {exc}", status_code=500)


class TestPipelineRun:
    def test_stages_run_in_order(self, config):
        calls = []
        pipeline = Pipeline([recording_stage(n, calls) for n in ("a", "b", "c")])

        result = asyncio.run(pipeline.run(make_context(config)))

        assert result is None
        assert calls == ["a", "b", "c"]

    def test_response_short_circuits(self, config):
        """A stage that answers prevents every later stage from running."""
        calls = []
        answer = PlainTextResponse("early")
        pipeline = Pipeline([
            recording_stage("a", calls),
            recording_stage("b", calls, response=answer),
            recording_stage("c", calls),
        ])

        result = asyncio.run(pipeline.run(make_context(config)))

        assert result is answer
        assert calls == ["a", "b"]

    def test_stage_errors_propagate(self, config):
        async def broken(ctx):
            raise ValueError("bad stage")

        pipeline = Pipeline([NamedStage("broken", broken)])

        with pytest.raises(ValueError):
            asyncio.run(pipeline.run(make_context(config)))


class TestPipelineFinalize:
    def test_hooks_run_last_registered_first(self, config):
        ctx = make_context(config)
        calls = []

        async def first(ctx, response):
            calls.append("first")

        async def second(ctx, response):
            calls.append("second")

        ctx.on_response(first)
        ctx.on_response(second)
        asyncio.run(Pipeline([]).finalize(ctx, PlainTextResponse("ok"), failing_responder))

        assert calls == ["second", "first"]

    def test_failing_hook_replaces_response(self, config):
        ctx = make_context(config)
        seen = []

        async def records(ctx, response):
            seen.append(response.status_code)

        async def explodes(ctx, response):
            raise RuntimeError("store down")

        ctx.on_response(records)
        ctx.on_response(explodes)
        response = asyncio.run(
            Pipeline([]).finalize(ctx, PlainTextResponse("ok"), failing_responder)
        )

        assert response.status_code == 500
        assert response.body == b"handled store down"
        assert seen == [500]

    def test_headers_are_applied_and_stripped(self, config):
        ctx = make_context(config)
        ctx.response_headers["X-Frame-Options"] = "SAMEORIGIN"
        ctx.stripped_headers.add("x-powered-by")

        response = asyncio.run(Pipeline([]).finalize(
            ctx,
            PlainTextResponse("ok", headers={"X-Powered-By": "Express"}),
            failing_responder,
        ))

        assert response.headers["x-frame-options"] == "SAMEORIGIN"
        assert "x-powered-by" not in response.headers


class TestRequestContext:
    def test_original_method_is_captured(self, config):
        assert make_context(config, method="POST").original_method == "POST"

    def test_flash_without_session_is_dropped(self, config):
        ctx = make_context(config)

        ctx.flash("errors", {"msg": "x"})

        assert ctx.consume_flashes() == {}

    def test_context_lookup_requires_pipeline(self, config):
        ctx = make_context(config)

        with pytest.raises(LookupError):
            get_request_context(ctx.request)


class TestBuildPipeline:
    """The assembled stage order."""

    def test_non_production_order(self, config, session_store, user_store):
        pipeline = build_pipeline(config, session_store, user_store)

        assert pipeline.names == BASE_STAGES

    def test_production_starts_with_canonical_host(
        self, production_config, session_store, user_store
    ):
        pipeline = build_pipeline(production_config, session_store, user_store)

        assert pipeline.names == ["canonical_host"] + BASE_STAGES

    def test_dependencies_come_before_dependents(self, config, session_store, user_store):
        names = build_pipeline(config, session_store, user_store).names

        assert names.index("body_parser") < names.index("validator")
        assert names.index("cookie_parser") < names.index("session")
        assert names.index("session") < names.index("auth") < names.index("flash")
        assert names.index("auth") < names.index("locals")
        assert names.index("static") < names.index("return_to")
