from functools import lru_cache

from fastapi import HTTPException

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.storage.local_avatar_storage import LocalAvatarStorage
from api.config import get_settings
from port.avatar_storage import AvatarStorage
from port.user_repository import UserRepository
from services.token_service import TokenService


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_avatar_storage() -> AvatarStorage:
    return LocalAvatarStorage(get_settings().upload_dir)


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service. Raises ConfigurationError without a secret."""
    settings = get_settings()
    return TokenService(settings.jwt_secret_key, settings.jwt_expires_in)
