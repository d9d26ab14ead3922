# =============================================================================
# app/main.py - Server Entry Point
# =============================================================================
# This is the process entry point. It:
# - configures logging
# - installs crash handlers (uncaught exceptions exit with code 1 so the
#   process supervisor restarts us)
# - connects the session and user stores
# - assembles the application and starts the listener
#
# Usage:
#   camp-server
#   uvicorn app.main:app --port 3000
# =============================================================================

import asyncio
import logging
import os
import sys
import threading
import traceback
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from redis.asyncio import Redis

from app.assembler import create_app
from app.config import settings
from lib.session_store import MemorySessionStore, RedisSessionStore, SessionStoreError
from lib.user_store import MemoryUserStore, RedisUserStore
from lib.utils import utc_timestamp

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Crash Handling
# =============================================================================

def _crash(message: str, stack: str) -> None:
    logger.critical(f"{utc_timestamp()} uncaughtException: {message}")
    logger.critical(stack)
    logging.shutdown()
    os._exit(1)


def _excepthook(exc_type, exc, tb) -> None:
    _crash(str(exc), "".join(traceback.format_exception(exc_type, exc, tb)))


def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
    _crash(
        str(args.exc_value),
        "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback)),
    )


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    if exc is None:
        # loop housekeeping messages (e.g. unclosed transports) are not crashes
        loop.default_exception_handler(context)
        return
    _crash(
        context.get("message") or str(exc),
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


def install_crash_handlers() -> None:
    """Exit the process with code 1 on any exception nobody handled."""
    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook


# =============================================================================
# Stores
# =============================================================================

if settings.uses_memory_store:
    session_store = MemorySessionStore()
    user_store = MemoryUserStore()
else:
    redis_client = Redis.from_url(settings.DATABASE_URL, decode_responses=True)
    session_store = RedisSessionStore(redis_client)
    user_store = RedisUserStore(redis_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: install the crash handlers, check the database. Both
    `camp-server` and `uvicorn app.main:app` pass through here.
    A database that is down is logged and tolerated; requests that need
    it will fail on their own.
    """
    install_crash_handlers()
    asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)

    try:
        await session_store.ping()
    except SessionStoreError as e:
        logger.error("Redis connection error. Please make sure that Redis is running.")
        logger.debug(str(e))

    logger.info(
        "Camp server listening on port %d in %s mode",
        settings.PORT,
        settings.ENVIRONMENT,
    )

    yield

    logger.info("Shutting down Camp server")
    await session_store.close()


app = create_app(
    settings.pipeline_config(),
    session_store=session_store,
    user_loader=user_store,
    lifespan=lifespan,
)


def run() -> None:
    """Start the HTTP listener."""
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        server_header=False,
        log_level="debug" if settings.DEBUG else settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
