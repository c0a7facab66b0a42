"""MongoDB implementation of UserRepository.

Login uniqueness is enforced by unique partial indexes on email, name and
phone, so the check and the write happen in one atomic server operation.
"""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import LoginIsOccupied, NotFoundError, ValidationError
from domain.model.user import LoginField, User

logger = getLogger(__name__)

_MUTABLE_FIELDS = {'email', 'name', 'phone', 'password_hash'}


def _index_name(field: LoginField) -> str:
    return f'idx_users_{field.value}'


def _occupied_field(error: DuplicateKeyError) -> LoginField:
    """Work out which login field a duplicate key error refers to."""
    details = error.details or {}
    for key in details.get('keyPattern', {}):
        if key in {f.value for f in LoginField}:
            return LoginField(key)

    message = details.get('errmsg', str(error))
    for field in LoginField:
        if _index_name(field) in message:
            return field
    raise error


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create unique partial indexes for every login field."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            for field in LoginField:
                create_index_safe(
                    self.collection,
                    [(field.value, 1)],
                    _index_name(field),
                    unique=True,
                    partialFilterExpression={field.value: {'$type': 'string'}},
                )
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            password_hash=doc['password_hash'],
            email=doc.get('email'),
            name=doc.get('name'),
            phone=doc.get('phone'),
        )

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        password_hash: str,
        email: str | None = None,
        name: str | None = None,
        phone: str | None = None,
    ) -> User:
        """Insert a new user document and return the User object."""
        if not password_hash:
            raise ValidationError("Password hash must not be empty")

        logins = {'email': email, 'name': name, 'phone': phone}
        logins = {k: v for k, v in logins.items() if v is not None}
        if not logins:
            raise ValidationError("At least one of email, name or phone is required")

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            **logins,
            'password_hash': password_hash,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            field = _occupied_field(e)
            logger.warning("User creation failed: login occupied", extra={"field": field.value})
            raise LoginIsOccupied(field) from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"error": str(e)})
            raise

        logger.info("User created", extra={"userId": user_id})
        return self._to_domain(user_doc)

    def update(self, user_id: str, changes: dict) -> User:
        """Apply changes in a single atomic document update."""
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {sorted(unknown)}")
        if 'password_hash' in changes and not changes['password_hash']:
            raise ValidationError("Password hash must not be empty")

        now = datetime.now(timezone.utc)
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': {**changes, 'updated_at': now}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            field = _occupied_field(e)
            logger.warning("User update failed: login occupied", extra={"userId": user_id, "field": field.value})
            raise LoginIsOccupied(field) from e
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise

        if doc is None:
            raise NotFoundError(f"User {user_id} not found")

        logger.info("User updated", extra={"userId": user_id, "fields": sorted(k for k in changes if k != 'password_hash')})
        return self._to_domain(doc)

    def clear(self) -> int:
        """Delete every user document."""
        result = self.collection.delete_many({})
        logger.warning("Users collection cleared", extra={"deleted": result.deleted_count})
        return result.deleted_count

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None

    def get_by_field(self, field: LoginField, value: str) -> User | None:
        """Find the user holding value in a login field (index lookup)."""
        field = LoginField(field)
        try:
            doc = self.collection.find_one({field.value: value})
        except PyMongoError as e:
            logger.error("Failed to get user by login", extra={"field": field.value, "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None
