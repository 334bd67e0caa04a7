"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import DUPLICATE_EMAIL_MESSAGE, DuplicateError
from domain.model.user import Role, User

logger = getLogger(__name__)

# Fields never read back by list_all()
_SUMMARY_PROJECTION = {
    'password_hash': 0,
    'otp': 0,
    'reset_token': 0,
    'reset_token_expires': 0,
}

_UPDATABLE_FIELDS = {
    'email', 'full_name', 'password_hash', 'role', 'is_verified',
    'otp', 'reset_token', 'reset_token_expires',
}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import USER_INDEXES, ensure_index

        try:
            return all([ensure_index(self.collection, spec) for spec in USER_INDEXES])
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            full_name=doc['full_name'],
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
            role=Role(doc.get('role', Role.USER.value)),
            is_verified=doc.get('is_verified', False),
            password_hash=doc.get('password_hash'),
            otp=doc.get('otp'),
            reset_token=doc.get('reset_token'),
            reset_token_expires=doc.get('reset_token_expires'),
        )

    def _find_one(self, query: dict, what: str) -> User | None:
        try:
            doc = self.collection.find_one(query)
            return self._to_domain(doc) if doc else None
        except PyMongoError as e:
            logger.error(f"Failed to get user by {what}", extra={"error": str(e)})
            return None

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, full_name: str, otp: str | None = None) -> User | None:
        """Create a new user and return the User object.

        Raises DuplicateError on the unique email index.
        """
        try:
            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)
            user_doc = {
                '_id': user_id,
                'email': email,
                'password_hash': password_hash,
                'full_name': full_name,
                'role': Role.USER.value,
                'is_verified': False,
                'otp': otp,
                'reset_token': None,
                'reset_token_expires': None,
                'created_at': now,
                'updated_at': now,
            }
            self.collection.insert_one(user_doc)

            logger.info("User created", extra={"userId": user_id})
            return self._to_domain(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: email already exists")
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE) from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"error": str(e)})
            return None

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Apply a partial update and return the updated user."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")

        changes = dict(fields)
        if isinstance(changes.get('role'), Role):
            changes['role'] = changes['role'].value
        changes['updated_at'] = datetime.now(timezone.utc)

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
            if not doc:
                return None
            logger.debug("Updated user", extra={"userId": user_id, "fields": sorted(fields)})
            return self._to_domain(doc)
        except DuplicateKeyError as e:
            logger.warning("User update failed: email already exists", extra={"userId": user_id})
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE) from e
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            return None

    def delete(self, user_id: str) -> bool:
        try:
            result = self.collection.delete_one({'_id': user_id})
            return result.deleted_count > 0
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            return False

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email}, 'email')

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id}, 'ID')

    def get_by_reset_token(self, token: str) -> User | None:
        if not token:
            return None
        return self._find_one({'reset_token': token}, 'reset token')

    def get_by_email_and_otp(self, email: str, otp: str) -> User | None:
        if not otp:
            return None
        return self._find_one({'email': email, 'otp': otp}, 'email and OTP')

    def list_all(self) -> list[User]:
        try:
            cursor = self.collection.find({}, _SUMMARY_PROJECTION).sort('created_at', 1)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"error": str(e)})
            return []
