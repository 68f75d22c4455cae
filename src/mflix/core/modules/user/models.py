from datetime import datetime
from enum import StrEnum

from pydantic import ConfigDict, Field

from mflix.core.db import MongoModel
from mflix.utils import now


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique.
    """

    email: str
    password_hash: str  # bcrypt hash
    role: UserRole = UserRole.USER
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    model_config = ConfigDict(use_enum_values=True)
