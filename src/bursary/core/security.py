"""
Security Utilities

Password hashing (bcrypt), JWT access tokens (python-jose) and the one-way
hashing used for invitation tokens at rest.
"""

import hashlib
import logging
import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from bursary.core.config import settings

logger = logging.getLogger(__name__)

INVITATION_TOKEN_BYTES = 32  # 256 bits of entropy


def hash_password(plain_password: str) -> str:
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def generate_invitation_token() -> str:
    """Generate the plaintext token that is emailed to the new principal."""
    return secrets.token_urlsafe(INVITATION_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """
    Hash an invitation token for storage using SHA-256.

    Only the hash is persisted; the plaintext exists in the invitation email.

    Args:
        token: The plain text token

    Returns:
        Hex-encoded SHA-256 digest (64 characters)
    """
    return hashlib.sha256(token.encode()).hexdigest()


def generate_temporary_password() -> str:
    """Password for admin accounts created without one."""
    return secrets.token_urlsafe(12)


def create_access_token(
    subject: str,
    principal: str,
    additional_claims: dict[str, Any] | None = None,
    expires_minutes: int | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: Principal ID placed in the ``sub`` claim
        principal: Principal kind, ``admin``, ``student`` or ``user``
        additional_claims: Extra claims such as ``email``
        expires_minutes: Override for ``ACCESS_TOKEN_EXPIRE_MINUTES``

    Returns:
        Encoded JWT string
    """
    now = datetime.now(UTC)
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    claims: dict[str, Any] = {
        "sub": subject,
        "principal": principal,
        "type": "access",
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(minutes=minutes),
        "jti": str(uuid.uuid4()),
    }
    if additional_claims:
        claims.update(additional_claims)
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Verify signature, audience, issuer and expiry of a token.

    Returns:
        The claims, or None when the token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None
