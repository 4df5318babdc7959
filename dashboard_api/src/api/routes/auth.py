from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends

from src.core.deps import get_credential_store, get_current_user
from src.core.errors import AuthError, ValidationError
from src.core.security import CredentialStore, create_access_token
from src.schemas.auth import AuthResponse, LoginRequest, UserPublic
from src.schemas.common import ApiResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
    summary="Login",
    description="Authenticate with the dashboard account and receive a 24h bearer token.",
)
async def login(
    payload: Optional[LoginRequest] = Body(default=None),
    store: CredentialStore = Depends(get_credential_store),
) -> ApiResponse[AuthResponse]:
    """Check the credentials and issue a token."""
    payload = payload or LoginRequest()
    if not payload.username or not payload.password:
        raise ValidationError("Username and password are required")

    user = store.authenticate(payload.username, payload.password)
    if user is None:
        raise AuthError("Invalid credentials")

    return ApiResponse.ok(AuthResponse(token=create_access_token(user), user=user))


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=ApiResponse[UserPublic],
    response_model_exclude_none=True,
    summary="Read current user",
    description="Return the principal carried by the bearer token.",
)
async def read_current_user(user: UserPublic = Depends(get_current_user)) -> ApiResponse[UserPublic]:
    return ApiResponse.ok(user)
