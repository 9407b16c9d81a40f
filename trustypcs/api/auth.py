"""Access token helpers and the admin guard for settings writes."""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Cookie, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from trustypcs.config import AppSettings

ADMIN_ROLES = ("admin", "moderator")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/token", auto_error=False)


class AuthError(Exception):
    """Request is not allowed to write settings."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def create_access_token(
    config: AppSettings,
    subject: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create JWT access token."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.access_token_expire_minutes)
    to_encode = {"sub": subject, "role": role, "exp": datetime.utcnow() + expires_delta}
    return jwt.encode(to_encode, config.secret_key, algorithm=config.algorithm)


def verify_access_token(config: AppSettings, token: str) -> Optional[dict]:
    """Decode a token, returning None when it is invalid or expired."""
    try:
        return jwt.decode(token, config.secret_key, algorithms=[config.algorithm])
    except JWTError:
        return None


def get_token_from_request(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(None),
) -> Optional[str]:
    """Get token from Authorization header or cookie."""
    if token:
        return token
    if access_token:
        return access_token
    return None


def require_settings_writer(
    request: Request,
    token: Optional[str] = Depends(get_token_from_request),
) -> Optional[dict]:
    """Require an admin token for settings writes when the guard is enabled."""
    config: AppSettings = request.app.state.config
    if not config.settings_write_requires_admin:
        return None
    if not token:
        raise AuthError(401, "Unauthorized")
    payload = verify_access_token(config, token)
    if payload is None or not payload.get("sub"):
        raise AuthError(401, "Unauthorized")
    if payload.get("role") not in ADMIN_ROLES:
        raise AuthError(403, "Admin access required")
    return payload
