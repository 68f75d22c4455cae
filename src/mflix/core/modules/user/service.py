from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from mflix.core.core import Service
from mflix.core.modules.user.models import User, UserRole
from mflix.core.modules.user.passwords import check_password_async, hash_password_async
from mflix.errors import ConflictError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Credential store backed by the users collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create the unique email index so concurrent registrations cannot both succeed."""
        await self._collection.create_index([("email", 1)], unique=True)

    async def find_user_by_email(self, email: str) -> User | None:
        doc = await self._collection.find_one({"email": email})
        if doc is None:
            return None
        return User.model_validate(doc)

    async def create_user(self, email: str, password: str, role: UserRole = UserRole.USER) -> User:
        """Create user with hashed password, rejecting duplicate emails."""
        if await self.find_user_by_email(email) is not None:
            raise ConflictError("User already exists")

        password_hash = await hash_password_async(password, self.core.config.bcrypt_rounds)
        user = User(email=email, password_hash=password_hash, role=role)
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            # Lost a check-then-insert race against another registration
            raise ConflictError("User already exists") from e

        logger.info("user_registered", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches, None for unknown email or mismatch."""
        user = await self.find_user_by_email(email)
        if user is None:
            return None
        if not await check_password_async(password, user.password_hash):
            return None
        return user

