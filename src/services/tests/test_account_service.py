"""Unit tests for account_service module."""

import unittest
from unittest.mock import patch

from adapter.fake.avatar_storage import FakeAvatarStorage
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    DomainError,
    DuplicateError,
    UploadRejectedError,
    ValidationError,
)
from services.account_service import (
    MAX_AVATAR_BYTES,
    update_profile,
    upload_avatar,
    validate_avatar,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestUpdateProfile(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = self.repo.create(email="a@x.com", password_hash="hash-a", name="A")
        self.other = self.repo.create(email="b@x.com", password_hash="hash-b", name="B")

    def test_update_name_only(self):
        updated = update_profile(self.repo, self.user, name="Alice")

        self.assertEqual(updated.name, "Alice")
        self.assertEqual(updated.email, "a@x.com")
        self.assertIsNone(updated.password_hash)

    def test_update_email(self):
        updated = update_profile(self.repo, self.user, email="new@x.com")

        self.assertEqual(updated.email, "new@x.com")
        self.assertIsNone(self.repo.get_by_email("a@x.com"))

    def test_same_email_is_not_a_conflict(self):
        updated = update_profile(self.repo, self.user, name="Alice", email="a@x.com")
        self.assertEqual(updated.name, "Alice")

    def test_email_taken_by_another_user(self):
        with self.assertRaises(DuplicateError) as ctx:
            update_profile(self.repo, self.user, email="b@x.com")

        self.assertEqual(str(ctx.exception), "Email already in use")
        self.assertEqual(self.repo.get_by_id(self.user.id).email, "a@x.com")

    def test_store_uniqueness_catches_race(self):
        """The store rejects a taken email even if the pre-check missed it."""
        with patch.object(self.repo, 'get_by_email', return_value=None):
            with self.assertRaises(DuplicateError):
                update_profile(self.repo, self.user, email="b@x.com")

    def test_empty_values_are_ignored(self):
        result = update_profile(self.repo, self.user, name="", email="")
        self.assertEqual(result.name, "A")
        self.assertEqual(result.email, "a@x.com")

    def test_store_failure_raises_domain_error(self):
        with patch.object(self.repo, 'update_profile', return_value=None):
            with self.assertRaises(DomainError):
                update_profile(self.repo, self.user, name="Alice")


class TestValidateAvatar(unittest.TestCase):

    def test_accepts_jpeg_and_png(self):
        validate_avatar("me.png", "image/png", 100)
        validate_avatar("me.JPG", "image/jpeg", 100)
        validate_avatar("me.jpeg", "image/jpeg", MAX_AVATAR_BYTES)

    def test_rejects_oversize(self):
        with self.assertRaises(UploadRejectedError) as ctx:
            validate_avatar("me.png", "image/png", MAX_AVATAR_BYTES + 1)
        self.assertEqual(str(ctx.exception), "File too large")

    def test_rejects_wrong_type(self):
        cases = [
            ("me.gif", "image/gif"),
            ("me.png", "image/gif"),
            ("me.gif", "image/png"),
            ("me", "image/png"),
            ("me.png", None),
        ]
        for filename, content_type in cases:
            with self.subTest(filename=filename, content_type=content_type):
                with self.assertRaises(UploadRejectedError):
                    validate_avatar(filename, content_type, 100)


class TestUploadAvatar(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.storage = FakeAvatarStorage()
        self.user = self.repo.create(email="a@x.com", password_hash="hash-a", name="A")

    def test_upload_sets_avatar_path(self):
        updated = upload_avatar(self.repo, self.storage, self.user, "me.png", "image/png", PNG_BYTES)

        self.assertTrue(updated.avatar.startswith(f"/uploads/{self.user.id}_"))
        self.assertTrue(updated.avatar.endswith(".png"))
        self.assertEqual(list(self.storage.files.values()), [PNG_BYTES])

    def test_repeat_upload_keeps_old_file(self):
        first = upload_avatar(self.repo, self.storage, self.user, "a.png", "image/png", PNG_BYTES)
        second = upload_avatar(self.repo, self.storage, self.user, "b.png", "image/png", PNG_BYTES)

        self.assertNotEqual(first.avatar, second.avatar)
        self.assertEqual(len(self.storage.files), 2)

    def test_missing_file(self):
        with self.assertRaises(ValidationError) as ctx:
            upload_avatar(self.repo, self.storage, self.user, None, None, None)
        self.assertEqual(str(ctx.exception), "No file uploaded")

    def test_oversize_leaves_avatar_unchanged(self):
        data = b"\x00" * (2 * 1024 + 1)
        with self.assertRaises(UploadRejectedError):
            upload_avatar(self.repo, self.storage, self.user, "me.png", "image/png", data, max_bytes=2 * 1024)

        self.assertIsNone(self.repo.get_by_id(self.user.id).avatar)
        self.assertEqual(self.storage.files, {})

    def test_store_failure_raises_domain_error(self):
        with patch.object(self.repo, 'update_avatar', return_value=None):
            with self.assertRaises(DomainError):
                upload_avatar(self.repo, self.storage, self.user, "me.png", "image/png", PNG_BYTES)


if __name__ == '__main__':
    unittest.main()
