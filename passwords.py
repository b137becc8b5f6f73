import logging

from extensions import bcrypt
from errors import InternalError

logger = logging.getLogger(__name__)

LOG_ROUNDS = 10   # bcrypt work factor


def hash_password(plaintext):
    """Return a salted bcrypt digest of ``plaintext`` as text."""
    try:
        return bcrypt.generate_password_hash(plaintext).decode("utf-8")
    except (ValueError, TypeError, MemoryError) as exc:
        logger.error("Password hashing failed: %s", type(exc).__name__)
        raise InternalError("password hashing failed") from exc


def verify_password(plaintext, digest):
    """Constant-time check of ``plaintext`` against a stored digest.

    A digest that is not a valid bcrypt hash never matches.
    """
    try:
        return bcrypt.check_password_hash(digest, plaintext)
    except ValueError:
        logger.warning("Stored password digest is malformed")
        return False
