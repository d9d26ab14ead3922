# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    User restored from the session.

    This is what templates and route handlers see as the current user.
    Only the id is stored in the session; the rest comes from the user store.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None


class UserResponse(BaseModel):
    """Public profile returned by the auth API."""
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
