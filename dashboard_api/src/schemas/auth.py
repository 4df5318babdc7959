from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login credentials. Missing fields default to empty so the route can answer 400."""
    username: str = Field("", description="Account username")
    password: str = Field("", description="Account password")


class UserPublic(BaseModel):
    """Public projection of the dashboard account (no password)."""
    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    email: str = Field(..., description="User email")


class AuthResponse(BaseModel):
    """Token issued on successful login."""
    token: str = Field(..., description="Signed bearer token (24h)")
    user: UserPublic = Field(...)
