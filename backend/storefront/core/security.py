"""
JWT session tokens for the admin panel

This module provides:
- Secret validation at startup (production refuses weak secrets)
- TokenIssuer: creation and verification of admin tokens
- FastAPI dependency guarding admin routes

Tokens carry the admin identity and role:
    {"username": "...", "role": "admin" | "superadmin", "type": "admin", "iat", "exp"}
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from storefront.core.config import Settings
from storefront.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "ADMIN_ROLES",
    "TokenIssuer",
    "resolve_jwt_secret",
    "security_scheme",
    "get_current_admin",
]

ADMIN_ROLES = ("admin", "superadmin")
ADMIN_TOKEN_TYPE = "admin"
MIN_SECRET_LENGTH = 32

# Only used outside production when JWT_SECRET is not set
_DEV_FALLBACK_SECRET = "dev_only_fallback_secret_not_for_production_use_32chars"


def resolve_jwt_secret(settings: Settings) -> str:
    """
    Pick the signing secret for this process.

    In production: JWT_SECRET must be set and at least 32 characters.
    Elsewhere: falls back to a development secret with a warning.
    """
    secret = settings.JWT_SECRET

    if secret and len(secret) >= MIN_SECRET_LENGTH:
        return secret

    if settings.is_production:
        raise ConfigurationError(
            "JWT_SECRET must be set and at least 32 characters in production"
        )

    if not secret:
        logger.warning("JWT_SECRET not set - using development fallback secret")
        return _DEV_FALLBACK_SECRET

    logger.warning(
        f"JWT_SECRET is only {len(secret)} characters. "
        "Recommended minimum is 32 characters."
    )
    return secret


class TokenIssuer:
    """Signs and verifies admin session tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_hours: int = 8):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_hours = expire_hours

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=resolve_jwt_secret(settings),
            algorithm=settings.JWT_ALGORITHM,
            expire_hours=settings.JWT_ADMIN_TOKEN_EXPIRE_HOURS,
        )

    def create_admin_token(self, username: str, role: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "username": username,
            "role": role,
            "type": ADMIN_TOKEN_TYPE,
            "iat": now,
            "exp": now + timedelta(hours=self.expire_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str, expected_type: Optional[str] = ADMIN_TOKEN_TYPE) -> Dict[str, Any]:
        """
        Verify and decode a token.

        Raises:
            jwt.ExpiredSignatureError: If token has expired
            jwt.InvalidTokenError: If token is invalid
            ValueError: If token type doesn't match expected
        """
        payload = jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            options={"require": ["exp", "iat"]},
        )

        if expected_type and payload.get("type") != expected_type:
            raise ValueError(f"Expected token type '{expected_type}', got '{payload.get('type')}'")

        return payload


# auto_error=False so a missing header is reported as 401 rather than FastAPI's default 403
security_scheme = HTTPBearer(auto_error=False)


async def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> Dict[str, Any]:
    """
    FastAPI dependency for admin routes.

    Missing bearer token -> 401. Expired, tampered, wrong-type or
    wrong-role token -> 403.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    issuer: TokenIssuer = request.app.state.token_issuer

    try:
        payload = issuer.verify_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token has expired")
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.warning(f"Rejected admin token: {e}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")

    if payload.get("role") not in ADMIN_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")

    return {
        "username": payload.get("username"),
        "role": payload.get("role"),
    }
