"""Bearer tokens shared with the hosted auth platform.

Only the ``sub`` and ``role`` claims are read; issuing tokens here is meant
for internal tooling and tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from ..config import get_settings

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("sub", "role")


def create_access_token(subject: str, role: str, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
    claims = {"sub": subject, "role": role, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    missing = [name for name in REQUIRED_CLAIMS if not claims.get(name)]
    if missing:
        raise JWTError(f"Token is missing claims: {', '.join(missing)}")
    return claims
