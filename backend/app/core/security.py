"""
Bearer token issuing and verification.

Tokens are HS256 JWTs whose ``sub`` claim identifies the back-office operator.
Issuing happens outside this API (login flow); ``create_access_token`` is kept
for operational scripts and tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from app.core.config import Settings, settings as default_settings


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
    settings: Settings = default_settings,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = dict(extra_claims or {})
    claims.update({"sub": subject, "exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings = default_settings) -> Optional[dict]:
    """Return the verified claims, or None for a bad signature, expiry or missing subject."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
