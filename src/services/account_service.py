"""Account service — profile updates and avatar uploads for an authenticated user."""

import re
from logging import getLogger
from pathlib import PurePath

from domain.model.errors import DomainError, DuplicateError, UploadRejectedError, ValidationError
from domain.model.user import User
from port.avatar_storage import AvatarStorage
from port.user_repository import UserRepository

logger = getLogger(__name__)

MAX_AVATAR_BYTES = 5 * 1024 * 1024
ALLOWED_AVATAR_TYPES = re.compile(r"jpeg|jpg|png")


def update_profile(repo: UserRepository, user: User, name: str | None = None, email: str | None = None) -> User:
    """Apply a partial name/email update to ``user``.

    Empty values are ignored. A changed email is re-checked for uniqueness;
    the store's unique index still has the final word.

    Raises:
        DuplicateError: the new email belongs to another user
        DomainError: the store failed to apply the update
    """
    name = name or None
    email = email or None

    if email is not None and email != user.email:
        owner = repo.get_by_email(email)
        if owner and owner.id != user.id:
            raise DuplicateError("Email already in use")

    if name is None and email is None:
        return user

    updated = repo.update_profile(user.id, name=name, email=email)
    if not updated:
        raise DomainError("Failed to update profile")

    logger.info("Profile updated", extra={"userId": user.id})
    return updated


def validate_avatar(filename: str | None, content_type: str | None, size: int,
                    max_bytes: int = MAX_AVATAR_BYTES) -> None:
    """Enforce the avatar size limit and the JPEG/PNG whitelist.

    Both the extension and the declared content type must match.
    """
    if size > max_bytes:
        raise UploadRejectedError("File too large")

    ext = PurePath(filename or "").suffix.lower()
    if not (ALLOWED_AVATAR_TYPES.search(content_type or "") and ALLOWED_AVATAR_TYPES.search(ext)):
        raise UploadRejectedError("Only JPEG/JPG/PNG images are allowed")


def upload_avatar(
    repo: UserRepository,
    storage: AvatarStorage,
    user: User,
    filename: str | None,
    content_type: str | None,
    data: bytes | None,
    max_bytes: int = MAX_AVATAR_BYTES,
) -> User:
    """Store a new avatar and point the user's ``avatar`` field at it.

    The previous avatar file is not removed.

    Raises:
        ValidationError: no file was uploaded
        UploadRejectedError: the file is too large or not an allowed image type
        DomainError: the store failed to record the new path
    """
    if data is None or not filename:
        raise ValidationError("No file uploaded")

    validate_avatar(filename, content_type, len(data), max_bytes)

    path = storage.save(user.id, filename, data)
    updated = repo.update_avatar(user.id, path)
    if not updated:
        raise DomainError("Failed to update avatar")

    logger.info("Avatar updated", extra={"userId": user.id, "avatar": path})
    return updated
