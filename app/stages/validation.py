# =============================================================================
# app/stages/validation.py - Validator Augmentation
# =============================================================================
# Attaches a RequestValidator to every request, with the custom
# match_regex check registered alongside the built-in ones.
# =============================================================================

from app.pipeline import RequestContext, Stage
from core.validation import RequestValidator, match_regex

CUSTOM_VALIDATORS = {
    "match_regex": match_regex,
}


def attach_validator() -> Stage:
    async def stage(ctx: RequestContext):
        body = ctx.body if isinstance(ctx.body, dict) else {}
        ctx.validator = RequestValidator(
            body=body,
            query=dict(ctx.request.query_params),
            custom_validators=CUSTOM_VALIDATORS,
        )
        return None

    return stage
