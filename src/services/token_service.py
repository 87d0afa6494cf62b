"""Session token issuing and verification.

Tokens are HS256 JWTs carrying the user id as ``sub`` plus ``iat``/``exp``.
Nothing is persisted: a token is valid as long as its signature checks out
and the injected clock has not passed ``exp``.
"""

import re
from datetime import datetime, timedelta, timezone
from logging import getLogger
from typing import Callable

from jose import JWTError, jwt

from domain.model.errors import ConfigurationError, ExpiredTokenError, MalformedTokenError

logger = getLogger(__name__)

JWT_ALGORITHM = "HS256"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value: str) -> timedelta:
    """Parse a time-to-live such as ``"7d"``, ``"12h"`` or ``"3600"``."""
    match = _DURATION_RE.match(value or "")
    if not match or int(match.group(1)) <= 0:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret_key: str | None,
        expires_in: timedelta,
        algorithm: str = JWT_ALGORITHM,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ConfigurationError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        self._secret_key = secret_key
        self.expires_in = expires_in
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: str) -> str:
        """Create a signed access token for ``user_id``."""
        now = self._clock()
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return the user id it was issued for.

        Signature comparison is constant-time (python-jose uses
        ``hmac.compare_digest``). Expiry is checked against the injected clock
        rather than the library's wall clock.

        Raises:
            MalformedTokenError: unparseable token, bad signature, missing claims
            ExpiredTokenError: the token's ``exp`` is in the past
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise MalformedTokenError(str(e)) from e

        user_id = payload.get("sub")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not user_id:
            raise MalformedTokenError("Token has no subject")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise MalformedTokenError("Token has no expiry")

        if self._clock().timestamp() > exp:
            raise ExpiredTokenError("Token expired")
        return user_id
