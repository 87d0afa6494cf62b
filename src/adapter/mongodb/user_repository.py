"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, StoreError
from domain.model.user import User

logger = getLogger(__name__)

# Lookups that feed the request context never carry the hash
PUBLIC_PROJECTION = {'password_hash': 0}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            avatar=doc.get('avatar'),
            last_login=doc.get('last_login'),
            password_hash=doc.get('password_hash'),
        )

    def create(self, email: str, password_hash: str, name: str) -> User | None:
        """Create a new user and return the User object.

        Raises:
            DuplicateError: the unique email index rejected the insert
        """
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'name': name,
            'avatar': None,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("Email already registered")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            return None

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found.

        Raises:
            StoreError: the lookup itself failed, so absence cannot be concluded
        """
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StoreError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID, without the password hash."""
        try:
            doc = self.collection.find_one({'_id': user_id}, PUBLIC_PROJECTION)
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            return None
        return self._to_domain(doc) if doc else None

    def update_profile(self, user_id: str, name: str | None = None, email: str | None = None) -> User | None:
        """Apply a partial name/email update and return the refreshed user.

        Raises:
            DuplicateError: the new email is already taken
        """
        updates = {}
        if name is not None:
            updates['name'] = name
        if email is not None:
            updates['email'] = email
        try:
            return self._update(user_id, updates)
        except DuplicateKeyError:
            logger.warning("Profile update failed: email already in use", extra={"userId": user_id})
            raise DuplicateError("Email already in use")

    def update_avatar(self, user_id: str, avatar: str) -> User | None:
        return self._update(user_id, {'avatar': avatar})

    def _update(self, user_id: str, updates: dict) -> User | None:
        updates['updated_at'] = datetime.now(timezone.utc)
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': updates},
                projection=PUBLIC_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            return None

        if not doc:
            logger.warning("Update matched no user", extra={"userId": user_id})
            return None
        logger.debug("Updated user", extra={"userId": user_id, "fields": sorted(updates)})
        return self._to_domain(doc)

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        try:
            now = datetime.now(timezone.utc)
            result = self.collection.update_one(
                {'_id': user_id},
                {'$set': {'last_login': now, 'updated_at': now}}
            )
            if result.modified_count > 0:
                logger.debug("Updated last_login", extra={"userId": user_id})
                return True
            return False
        except PyMongoError as e:
            logger.error("Failed to update last_login", extra={"userId": user_id, "error": str(e)})
            return False
