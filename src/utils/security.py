"""Security utilities for password hashing and verification.

Passwords are hashed with bcrypt through passlib, using the work factor from
settings.
"""

from passlib.context import CryptContext

from src.core.config.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: Bcrypt-hashed password
    """
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash (constant-time via bcrypt)."""
    if not hashed_password:
        return False
    return pwd_context.verify(password, hashed_password)


def dummy_verify() -> None:
    """Spend the same time as a real check when the user does not exist."""
    pwd_context.dummy_verify()
