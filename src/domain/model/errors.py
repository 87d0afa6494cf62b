"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class InvalidCredentialsError(DomainError):
    """Login failed. Deliberately does not say which part was wrong."""


class AuthenticationError(DomainError):
    """Request could not be authenticated.

    ``reason`` is for operator logs only and must never reach the client.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class UploadRejectedError(DomainError):
    """Uploaded file violates the size or type policy."""


class StoreError(DomainError):
    """The credential store failed to answer."""


class TokenVerificationError(DomainError):
    """Session token could not be verified."""


class MalformedTokenError(TokenVerificationError):
    """Token cannot be parsed, has a bad signature or missing claims."""


class ExpiredTokenError(TokenVerificationError):
    """Token signature is valid but its expiry has passed."""


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
