# =============================================================================
# app/routers/ - Mounted Route Handlers
# =============================================================================
# This package contains the routers the server mounts, organized by feature:
# - field_guide.py: Field guide articles
# - challenge_map.py: The challenge map
# - challenge.py: Individual challenges
# - jobs.py: Job board
# - redirects.py: Legacy URL redirects
# - utility.py: Health checks and robots.txt
# - story.py: Camper News stories and comments
# - home.py: Landing page
# - user.py: Account page and public profiles (catch-all, mounted last)
#
# Authentication routes live in app/auth/routes.py.
#
# Routers are mounted in MOUNT_ORDER; for a request that several routers
# could answer, the first one mounted wins.
# =============================================================================

from fastapi import APIRouter

from app.auth import routes as auth_routes

from . import challenge
from . import challenge_map
from . import field_guide
from . import home
from . import jobs
from . import redirects
from . import story
from . import user
from . import utility

MOUNT_ORDER = (
    ("field_guide", field_guide.router),
    ("challenge_map", challenge_map.router),
    ("challenge", challenge.router),
    ("jobs", jobs.router),
    ("redirects", redirects.router),
    ("utility", utility.router),
    ("story", story.router),
    ("auth", auth_routes.router),
    ("home", home.router),
    ("user", user.router),
)


def default_routers() -> list[APIRouter]:
    return [router for _, router in MOUNT_ORDER]


__all__ = [
    "MOUNT_ORDER",
    "default_routers",
]
