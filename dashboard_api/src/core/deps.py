from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError

from src.core.errors import AuthError
from src.core.logging import username_var
from src.core.security import CredentialStore, decode_token
from src.db.session import DatabaseManager
from src.schemas.auth import UserPublic
from src.services.clients import ClientListingService
from src.services.dashboard import DashboardService

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches get_current_user and gets the standard envelope
bearer_scheme = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def get_db(request: Request) -> DatabaseManager:
    """Return the DatabaseManager built by the application lifespan."""
    return request.app.state.db


# PUBLIC_INTERFACE
def get_credential_store(request: Request) -> CredentialStore:
    """Return the CredentialStore built by the application lifespan."""
    return request.app.state.credentials


# PUBLIC_INTERFACE
def get_client_service(db: DatabaseManager = Depends(get_db)) -> ClientListingService:
    return ClientListingService(db)


# PUBLIC_INTERFACE
def get_dashboard_service(db: DatabaseManager = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


# PUBLIC_INTERFACE
async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserPublic:
    """
    Resolve the principal from the Authorization bearer token.

    Raises:
        AuthError 401 when no bearer token is sent, 403 when it is invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError.missing_token()

    try:
        payload = decode_token(credentials.credentials)
        user = UserPublic.model_validate(payload)
    except (JWTError, PydanticValidationError):
        logger.info("Rejected bearer token on %s", request.url.path)
        raise AuthError.invalid_token()

    request.state.user = user
    username_var.set(user.username)
    return user
