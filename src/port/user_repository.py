from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations enforce email uniqueness themselves and raise
    ``DuplicateError`` when a write would violate it.
    """
    def create(self, email: str, password_hash: str, name: str) -> User | None:
        """Create a new user. Return User or None if creation failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email, password hash included. Return None if not found.

        Raises StoreError when the lookup fails.
        """
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID with the password hash projected out."""
        ...

    def update_profile(self, user_id: str, name: str | None = None, email: str | None = None) -> User | None:
        """Apply a partial name/email update. Return the refreshed User or None."""
        ...

    def update_avatar(self, user_id: str, avatar: str) -> User | None:
        """Replace the avatar path. Return the refreshed User or None."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...
