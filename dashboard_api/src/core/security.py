from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from src.core.settings import AppSettings, get_app_settings
from src.schemas.auth import UserPublic

logger = logging.getLogger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password using bcrypt."""
    return _pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context.hash(password)


class CredentialStore:
    """
    The single dashboard account.

    Only a bcrypt hash of the password is kept. Username comparison uses
    secrets.compare_digest and the password check always runs, so a wrong
    username takes as long to reject as a wrong password.
    """

    def __init__(self, user: UserPublic, password_hash: str) -> None:
        self.user = user
        self._password_hash = password_hash

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "CredentialStore":
        settings = settings or get_app_settings()
        password_hash = settings.ADMIN_PASSWORD_HASH or get_password_hash(settings.ADMIN_PASSWORD)
        user = UserPublic(
            id=settings.ADMIN_ID,
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
        )
        return cls(user, password_hash)

    def authenticate(self, username: str, password: str) -> Optional[UserPublic]:
        """Return the public user when both fields match, otherwise None."""
        username_ok = secrets.compare_digest(
            username.encode("utf-8"), self.user.username.encode("utf-8")
        )
        password_ok = verify_password(password, self._password_hash)
        if username_ok and password_ok:
            return self.user
        logger.info("Rejected login attempt for username=%r", username)
        return None


# PUBLIC_INTERFACE
def create_access_token(user: UserPublic, expires_minutes: Optional[int] = None) -> str:
    """Sign a token carrying the public user fields, valid 24h unless overridden."""
    settings = get_app_settings()
    now = datetime.now(tz=timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode: Dict[str, Any] = user.model_dump()
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# PUBLIC_INTERFACE
def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT; raises JWTError if invalid/expired."""
    settings = get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
