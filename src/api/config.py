"""Process configuration read from the environment."""

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from services.account_service import MAX_AVATAR_BYTES
from services.token_service import parse_duration

DEFAULT_JWT_EXPIRES_IN = "7d"


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str | None
    jwt_expires_in: timedelta
    cors_origins: str
    port: int
    api_prefix: str
    upload_dir: Path
    max_avatar_bytes: int


def load_settings() -> Settings:
    """Build Settings from environment variables.

    A missing JWT_SECRET_KEY is not rejected here; the token service refuses
    to start without it.
    """
    return Settings(
        jwt_secret_key=os.getenv("JWT_SECRET_KEY"),
        jwt_expires_in=parse_duration(os.getenv("JWT_EXPIRES_IN", DEFAULT_JWT_EXPIRES_IN)),
        cors_origins=os.getenv("CORS_ORIGINS", "*"),
        port=int(os.getenv("PORT", "8000")),
        api_prefix=os.getenv("API_PREFIX", "/api/users").rstrip("/"),
        upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
        max_avatar_bytes=int(os.getenv("MAX_AVATAR_BYTES", str(MAX_AVATAR_BYTES))),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
