"""Auth service — registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

from logging import getLogger

import bcrypt

from domain.model.errors import DomainError, DuplicateError, InvalidCredentialsError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository

logger = getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72

INVALID_CREDENTIALS = "Invalid credentials"
ALL_FIELDS_REQUIRED = "All fields are required"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Check ``plain`` against a stored bcrypt hash. Never raises."""
    if not hashed:
        return False
    # bcrypt 5 raises on over-long input; such a password can never match
    if len(plain.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is not a valid bcrypt hash")
        return False


def _validate_password(password: str) -> None:
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")


def register(repo: UserRepository, name: str | None, email: str | None, password: str | None) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: a field is missing or the password is unusable
        DuplicateError: email already registered
        DomainError: the store failed to create the user
    """
    if not name or not email or not password:
        raise ValidationError(ALL_FIELDS_REQUIRED)

    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    _validate_password(password)
    password_hash = hash_password(password)

    # The store's unique index decides concurrent registrations
    user = repo.create(email=email, password_hash=password_hash, name=name)
    if not user:
        raise DomainError("Failed to create user")
    return user


def authenticate(repo: UserRepository, email: str | None, password: str | None) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password produce the same error so the response
    doesn't reveal whether the email exists.

    Raises:
        ValidationError: a field is missing
        InvalidCredentialsError: invalid credentials (deliberately vague)
        StoreError: the email lookup failed
    """
    if not email or not password:
        raise ValidationError(ALL_FIELDS_REQUIRED)

    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    # Login succeeds even if the timestamp write fails
    repo.update_last_login(user.id)
    return user
