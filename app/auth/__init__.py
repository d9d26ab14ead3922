# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Session-based identity: the session keeps a user id, the pipeline
# restores the user on every request.
#
# Usage:
#   from app.auth import login, logout
#   from app.auth.dependencies import get_current_user
# =============================================================================

from app.auth.models import AuthUser, UserResponse
from app.auth.session import login, logout, redirect_after_login

__all__ = [
    "AuthUser",
    "UserResponse",
    "login",
    "logout",
    "redirect_after_login",
]
