from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from mflix.core.core import Service
from mflix.core.modules.session.models import AuthToken, Session, TokenClaims
from mflix.core.modules.session.tokens import TokenSigner
from mflix.core.modules.user.models import User
from mflix.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Issues tokens, records sessions and verifies presented tokens."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._signer: TokenSigner | None = None

    @property
    def signer(self) -> TokenSigner:
        if self._signer is None:
            config = self.core.config
            self._signer = TokenSigner(config.jwt_secret, config.token_ttl_seconds)
        return self._signer

    async def on_start(self) -> None:
        """Create indexes and warn about the fallback signing secret."""
        await self._collection.create_index([("token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        # TTL index: MongoDB drops the record once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

        if self.core.config.uses_default_secret:
            logger.warning("default_jwt_secret_in_use", hint="set MFLIX_JWT_SECRET")

    async def create_session(self, user: User, issued_at: datetime | None = None) -> AuthToken:
        """Issue a token for the user and persist a session record mirroring it."""
        issued_at = issued_at or now()
        token, claims = self.signer.issue(user, issued_at)
        created_at = datetime.fromtimestamp(claims.iat, tz=UTC)
        session = Session(
            user_id=user.id,
            token=token,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=self.signer.ttl_seconds),
        )
        await self._collection.insert_one(session.to_mongo())
        logger.debug("session_created", user_id=str(user.id), expires_at=session.expires_at.isoformat())
        return token

    def verify_token(self, token: str) -> TokenClaims:
        """Verify signature and expiry without touching the store."""
        return self.signer.verify(token)
