"""Password hashing and JWT signing/verification."""
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from blogcore.config import settings


def hash_password(plain_password: str) -> str:
    """Return a salted bcrypt hash of *plain_password*."""
    # bcrypt only looks at the first 72 bytes and newer releases reject longer input.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_token(claims: dict[str, Any], expires_delta: timedelta) -> str:
    """Sign *claims* with ``iat``/``exp`` added."""
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises ``jwt.PyJWTError`` on an invalid or expired token.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
