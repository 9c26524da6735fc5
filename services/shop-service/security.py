"""Password hashing."""
import hmac
import logging
import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def is_hashed(stored: str) -> bool:
    return isinstance(stored, str) and stored.startswith(BCRYPT_PREFIXES)


def verify_password(password: str, stored: str) -> bool:
    """
    Check a login password against the stored value.

    Accounts created before hashing was introduced still hold the plaintext
    password; those are compared in constant time so the caller can rehash
    them on a successful login.

    Args:
        password: Password supplied by the caller
        stored: Value from the user document

    Returns:
        True if the password matches
    """
    if not isinstance(password, str) or not stored:
        return False

    if is_hashed(stored):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    return hmac.compare_digest(password.encode("utf-8"), str(stored).encode("utf-8"))
