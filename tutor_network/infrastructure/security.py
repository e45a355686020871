"""Password Hashing and Access Tokens — bcrypt hashes and HS256 JWTs.

Invariants:
    - Plain passwords never leave this module (only bcrypt hashes are stored)
    - verify_password never raises; malformed hashes verify as False
    - Tokens carry sub (user id), type (user type), iat and exp; decode rejects expired tokens
    - Every token failure surfaces as AuthenticationError
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from tutor_network.config import Settings
from tutor_network.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes; longer input raises in bcrypt>=5
_BCRYPT_MAX_BYTES = 72


def _encode_password(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(
        _encode_password(password), bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(
            _encode_password(password), password_hash.encode("utf-8"),
        )
    except ValueError as e:
        logger.error(f"Error verifying password: {e}")
        return False


def create_access_token(
    user_id: UUID, user_type: str, settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": str(user_id),
        "type": user_type,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> UUID:
    """Return the user id carried by a valid token."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired, please log in again")
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid authentication token")
    try:
        return UUID(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid authentication token")
