"""Session and token models."""

from datetime import datetime
from typing import NewType

from pydantic import BaseModel, Field

from mflix.core.db import MongoModel, PyObjectId
from mflix.utils import now

AuthToken = NewType("AuthToken", str)


class TokenClaims(BaseModel):
    """Claims embedded in a signed token. Never persisted as a structure."""

    user_id: str
    email: str
    role: str
    iat: int  # Issued-at, seconds since epoch
    exp: int  # Always iat + token TTL


class Session(MongoModel):
    """Server-side record mirroring an issued token.

    Indexed on token - unique, user_id, expires_at (TTL).
    """

    user_id: PyObjectId
    token: str
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime
