"""Security utilities: password hashing and signup input checks."""

import re
import secrets

import bcrypt
from loguru import logger

# Good enough to reject obvious typos; deliverability is not checked
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

AVATAR_URL_TEMPLATE = "https://avatar.iran.liara.run/public/{index}.png"
AVATAR_COUNT = 100


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a plain text password using bcrypt.

    Args:
        password: Plain text password to hash
        rounds: bcrypt cost factor

    Returns:
        Hashed password string

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")

    # bcrypt only looks at the first 72 bytes and newer releases reject longer input
    secret = password.encode("utf-8")[:72]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against its bcrypt hash."""
    if not plain_password or not hashed_password:
        return False

    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8")[:72], hashed_password.encode("utf-8")
        )
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email.strip()))


def random_avatar_url() -> str:
    """Pick one of the generated public avatars for a new account."""
    index = secrets.randbelow(AVATAR_COUNT) + 1
    return AVATAR_URL_TEMPLATE.format(index=index)
