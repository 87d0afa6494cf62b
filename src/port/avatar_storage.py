"""Port definition for AvatarStorage."""

from typing import Protocol


class AvatarStorage(Protocol):
    def save(self, user_id: str, filename: str, data: bytes) -> str:
        """Persist an avatar image and return its server-relative URL path."""
        ...
