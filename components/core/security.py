"""Security utilities for JWT and password handling."""

from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import hmac
import os
from jose import JWTError, jwt
from components.core.config import get_settings

PBKDF2_ITERATIONS = 100_000


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        salt, _ = hashed_password.split(':', 1)
    except ValueError:
        return False
    return hmac.compare_digest(get_password_hash(plain_password, salt), hashed_password)


def get_password_hash(password: str, salt: Optional[str] = None) -> str:
    """Generate password hash using salted PBKDF2-SHA256."""
    if salt is None:
        salt = os.urandom(16).hex()
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS
    )
    return f"{salt}:{digest.hex()}"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a new JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify a JWT token and return its payload."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
