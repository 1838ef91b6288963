"""
DogPatch Backend - Credential Utilities
========================================

What:  Password hashing and bearer token generation.
How:   bcrypt for passwords (cost from settings.password_hash_rounds),
       `secrets` for opaque tokens.
"""

import logging
import secrets

import bcrypt

from dogpatch.config import settings

logger = logging.getLogger(__name__)

# 16 random bytes, matching the token length already issued to clients
TOKEN_BYTES = 16


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.password_hash_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against its bcrypt hash.

    Returns False (never raises) for malformed hashes, so a corrupted row
    reads as "wrong password" rather than a 500.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error("Password verification failed: %s", e)
        return False


def generate_token() -> str:
    """URL-safe random bearer token."""
    return secrets.token_urlsafe(TOKEN_BYTES)
