"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        # Stands in for the unique email index
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, name: str) -> User | None:
        with self._lock:
            if self._find_email(email):
                raise DuplicateError("Email already registered")

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)

            user = User(
                id=user_id,
                name=name,
                email=email,
                created_at=now,
                updated_at=now,
                password_hash=password_hash,
            )
            self.store[user_id] = user
            return replace(user)

    def update_profile(self, user_id: str, name: str | None = None, email: str | None = None) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None
            if email is not None:
                owner = self._find_email(email)
                if owner and owner.id != user_id:
                    raise DuplicateError("Email already in use")
                user.email = email
            if name is not None:
                user.name = name
            user.updated_at = datetime.now(timezone.utc)
            return self._public(user)

    def update_avatar(self, user_id: str, avatar: str) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None
            user.avatar = avatar
            user.updated_at = datetime.now(timezone.utc)
            return self._public(user)

    def update_last_login(self, user_id: str) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False

            now = datetime.now(timezone.utc)
            user.last_login = now
            user.updated_at = now
            return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        user = self._find_email(email)
        return replace(user) if user else None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return self._public(user) if user else None

    def _find_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    @staticmethod
    def _public(user: User) -> User:
        return replace(user, password_hash=None)
