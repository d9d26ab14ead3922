# =============================================================================
# core/navigation.py - Post-Login Return Path
# =============================================================================
# Decides which request paths are worth remembering so that signing in can
# send the user back to where they started. Auth pages, fonts, the favicon
# and story comment fragments are never remembered.
# =============================================================================

import re

RETURN_TO_KEY = "returnTo"

# matched anywhere inside the first path segment, e.g. "/signin", "/auth/github"
_EXCLUDED_SEGMENT = re.compile(r"auth|login|logout|signin|signup|fonts|favicon", re.IGNORECASE)
_STORY_COMMENT = re.compile(r"/stories/comments/\w+", re.IGNORECASE)


def first_segment(path: str) -> str:
    parts = path.split("/")
    return parts[1] if len(parts) > 1 else ""


def should_remember(path: str) -> bool:
    """
    True if a request to ``path`` should become the post-login destination.

    Example:
        should_remember("/map")                    # True
        should_remember("/auth/github/callback")   # False
        should_remember("/stories/comments/5a1f")  # False
    """
    if _EXCLUDED_SEGMENT.search(first_segment(path)):
        return False
    if _STORY_COMMENT.search(path):
        return False
    return True
