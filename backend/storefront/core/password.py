"""
bcrypt hashing for admin account passwords.
"""

import bcrypt
import logging

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Salted bcrypt hash of `password` at the given cost.

    Raises:
        ValueError: empty password
    """
    if not password:
        raise ValueError("Password cannot be empty")
    if len(password.encode('utf-8')) > BCRYPT_MAX_BYTES:
        logger.warning("Password longer than 72 bytes; only the first 72 are used")

    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """True only for a well-formed hash that matches."""
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_encode(password), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.warning(f"Stored password hash is malformed: {e}")
        return False
