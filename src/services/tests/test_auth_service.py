"""Unit tests for auth_service module."""

import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    StoreError,
    ValidationError,
)
from services.auth_service import (
    authenticate,
    hash_password,
    register,
    verify_password,
)

_fast_hashing = patch('services.auth_service.BCRYPT_ROUNDS', 4)


def setUpModule():
    _fast_hashing.start()


def tearDownModule():
    _fast_hashing.stop()


class TestPasswordHashing(unittest.TestCase):

    def test_round_trip(self):
        hashed = hash_password("secret123")
        self.assertNotEqual(hashed, "secret123")
        self.assertTrue(verify_password("secret123", hashed))

    def test_wrong_password_fails(self):
        hashed = hash_password("secret123")
        self.assertFalse(verify_password("secret124", hashed))
        self.assertFalse(verify_password("", hashed))

    def test_salt_is_random(self):
        self.assertNotEqual(hash_password("secret123"), hash_password("secret123"))

    def test_corrupt_hash_does_not_raise(self):
        self.assertFalse(verify_password("secret123", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("secret123", None))

    def test_over_long_password_fails_quietly(self):
        """Passwords past bcrypt's input limit never match and are not blamed on the stored hash."""
        hashed = hash_password("secret123")

        with self.assertNoLogs('services.auth_service', level='ERROR'):
            self.assertFalse(verify_password("x" * 73, hashed))


class TestRegister(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()

    def test_register_success(self):
        user = register(self.repo, "A", "a@x.com", "secret123")

        self.assertEqual(user.name, "A")
        self.assertEqual(user.email, "a@x.com")
        self.assertIsNone(user.avatar)
        self.assertTrue(verify_password("secret123", user.password_hash))
        self.assertIsNotNone(self.repo.get_by_id(user.id))

    def test_missing_fields(self):
        for name, email, password in [
            (None, "a@x.com", "secret123"),
            ("A", None, "secret123"),
            ("A", "a@x.com", None),
            ("", "a@x.com", "secret123"),
        ]:
            with self.subTest(name=name, email=email, password=password):
                with self.assertRaises(ValidationError) as ctx:
                    register(self.repo, name, email, password)
                self.assertEqual(str(ctx.exception), "All fields are required")
        self.assertEqual(self.repo.store, {})

    def test_duplicate_email_conflicts_regardless_of_other_fields(self):
        register(self.repo, "A", "a@x.com", "secret123")

        for name, password in [("A", "secret123"), ("B", "other-pass"), ("C", "x")]:
            with self.subTest(name=name):
                with self.assertRaises(DuplicateError):
                    register(self.repo, name, "a@x.com", password)
        self.assertEqual(len(self.repo.store), 1)

    def test_password_over_bcrypt_limit_rejected(self):
        with self.assertRaises(ValidationError):
            register(self.repo, "A", "a@x.com", "x" * 73)

    def test_store_failure_raises_domain_error(self):
        with patch.object(self.repo, 'create', return_value=None):
            with self.assertRaises(DomainError):
                register(self.repo, "A", "a@x.com", "secret123")

    def test_concurrent_registrations_only_one_wins(self):
        def attempt(i):
            try:
                register(self.repo, f"user{i}", "same@x.com", "secret123")
                return "ok"
            except DuplicateError:
                return "conflict"

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(8)))

        self.assertEqual(results.count("ok"), 1)
        self.assertEqual(results.count("conflict"), 7)
        self.assertEqual(len(self.repo.store), 1)


class TestAuthenticate(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = register(self.repo, "A", "a@x.com", "secret123")

    def test_authenticate_success(self):
        user = authenticate(self.repo, "a@x.com", "secret123")
        self.assertEqual(user.id, self.user.id)

    def test_authenticate_updates_last_login(self):
        authenticate(self.repo, "a@x.com", "secret123")
        self.assertIsNotNone(self.repo.store[self.user.id].last_login)

    def test_wrong_password_and_unknown_email_look_the_same(self):
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            authenticate(self.repo, "a@x.com", "wrong")
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            authenticate(self.repo, "nobody@x.com", "secret123")

        self.assertEqual(str(wrong_password.exception), "Invalid credentials")
        self.assertEqual(str(unknown_email.exception), str(wrong_password.exception))

    def test_missing_fields(self):
        with self.assertRaises(ValidationError):
            authenticate(self.repo, "a@x.com", None)
        with self.assertRaises(ValidationError):
            authenticate(self.repo, "", "secret123")

    def test_login_succeeds_when_last_login_write_fails(self):
        with patch.object(self.repo, 'update_last_login', return_value=False):
            user = authenticate(self.repo, "a@x.com", "secret123")
        self.assertEqual(user.id, self.user.id)

    def test_store_failure_is_not_invalid_credentials(self):
        with patch.object(self.repo, 'get_by_email', side_effect=StoreError("Failed to look up user")):
            with self.assertRaises(StoreError):
                authenticate(self.repo, "a@x.com", "secret123")


if __name__ == '__main__':
    unittest.main()
