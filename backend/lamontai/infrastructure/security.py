"""Credentials — bcrypt password hashing, JWT access tokens, password-reset tokens.

Invariants:
    - Plain passwords never leave this module except as bcrypt hashes
    - Passwords are truncated to bcrypt's 72-byte input limit before hashing AND verifying
    - decode_access_token raises AuthenticationError for every invalid token (never returns None)
    - Reset tokens are stored hashed (sha256); only the caller ever sees the plain value

Design Decisions:
    - HS256 JWT with sub/iat/exp/jti: jti allows logout revocation via the cache
    - verify_password returns False on malformed hashes instead of raising: a corrupt
      row must look like a wrong password, not a 500
"""

import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from lamontai.core.errors import AuthenticationError

_BCRYPT_MAX_BYTES = 72


def _encode_password(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_encode_password(plain), bcrypt.gensalt(rounds)).decode("ascii")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_encode_password(plain), hashed.encode("ascii"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    subject: str,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    """Signed JWT for a user id."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> dict:
    """Verified claims of a JWT. Raises AuthenticationError on any failure."""
    try:
        return jwt.decode(
            token, secret, algorithms=[algorithm],
            options={"require": ["exp", "sub", "jti"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Not authorized, token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Not authorized, token failed")


def generate_reset_token() -> tuple[str, str]:
    """(plain, hashed) password-reset token pair."""
    plain = secrets.token_hex(20)
    return plain, hash_reset_token(plain)


def hash_reset_token(plain: str) -> str:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def seconds_until(expires_at: int | float) -> int:
    """Whole seconds from now until a unix timestamp (never negative)."""
    remaining = int(expires_at - datetime.now(timezone.utc).timestamp())
    return max(0, remaining)
