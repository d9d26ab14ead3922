# =============================================================================
# app/stages/session.py - Sessions and Flash Messages
# =============================================================================
# attach_session loads the session named by the signed cookie, or starts a
# new one, and saves it back once the response is ready. Every request that
# reaches this stage saves its session, including anonymous visitors with
# an empty one, and gets the cookie (re)set.
#
# attach_flash binds flash messages to the loaded session.
# =============================================================================

import logging

from itsdangerous import BadSignature, Signer
from starlette.responses import Response

from app.pipeline import RequestContext, Stage
from core.session import Flash, SessionRecord
from lib.session_store import SessionStore

logger = logging.getLogger(__name__)

SIGNER_SALT = "campsite.session"


def session_signer(secret: str) -> Signer:
    return Signer(secret, salt=SIGNER_SALT)


def sign_session_id(signer: Signer, session_id: str) -> str:
    return signer.sign(session_id).decode("utf-8")


def unsign_session_id(signer: Signer, cookie_value: str) -> str | None:
    try:
        return signer.unsign(cookie_value).decode("utf-8")
    except BadSignature:
        logger.debug("Ignoring session cookie with a bad signature")
        return None


def attach_session(
    store: SessionStore,
    secret: str,
    cookie_name: str,
    ttl_seconds: int,
) -> Stage:
    """
    Build the session stage.

    Args:
        store: Durable session store
        secret: Secret used to sign the session cookie
        cookie_name: Name of the session cookie
        ttl_seconds: Store expiry, refreshed on every save
    """
    signer = session_signer(secret)

    async def save(ctx: RequestContext, response: Response) -> None:
        record = ctx.session
        if record is None:
            return
        await store.save(record.id, record.data, ttl_seconds)
        response.set_cookie(
            cookie_name,
            sign_session_id(signer, record.id),
            path="/",
            httponly=True,
            samesite="lax",
            secure=ctx.config.is_production and ctx.request.url.scheme == "https",
        )

    async def stage(ctx: RequestContext):
        record = None
        cookie_value = ctx.cookies.get(cookie_name)
        session_id = unsign_session_id(signer, cookie_value) if cookie_value else None

        if session_id:
            data = await store.load(session_id)
            if data is not None:
                record = SessionRecord(id=session_id, data=data, is_new=False)

        ctx.session = record or SessionRecord()
        ctx.on_response(save)
        return None

    return stage


def attach_flash() -> Stage:
    async def stage(ctx: RequestContext):
        if ctx.session is not None:
            ctx.flashes = Flash(ctx.session)
        return None

    return stage
