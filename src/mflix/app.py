from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from bson import ObjectId
from pymongo import AsyncMongoClient

from mflix.config import Config
from mflix.core.core import Core
from mflix.core.modules.catalog.models import CatalogKind, Document, Page
from mflix.core.modules.catalog.service import DocumentService
from mflix.core.modules.session.models import AuthToken, TokenClaims
from mflix.core.modules.user.validators import validate_credentials
from mflix.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations. Routers and middleware call only this."""

    def __init__(self, config: Config, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, mongo_client)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Auth ===
    async def register(self, email: Any, password: Any) -> ObjectId:
        """Create a user with the default role and return its id."""
        email, password = validate_credentials(email, password)
        user = await self._core.services.user.create_user(email, password)
        return user.id

    async def login(self, email: Any, password: Any) -> AuthToken:
        """Authenticate user and create session.

        Unknown email and wrong password fail identically.
        """
        email, password = validate_credentials(email, password)
        user = await self._core.services.user.authenticate(email, password)
        if user is None:
            logger.info("login_failed")
            raise AuthenticationError("Invalid credentials")
        token = await self._core.services.session.create_session(user)
        logger.info("login_succeeded", user_id=str(user.id))
        return token

    def verify_token(self, token: str) -> TokenClaims:
        """Check a presented token. Raises AccessDeniedError when invalid or expired."""
        return self._core.services.session.verify_token(token)

    # === Catalog ===
    async def list_documents(self, kind: CatalogKind, page: Page) -> list[Document]:
        return await self._resolve_service(kind).list_documents(page)

    async def get_document(self, kind: CatalogKind, document_id: str) -> Document:
        return await self._resolve_service(kind).get_document(document_id)

    async def create_document(self, kind: CatalogKind, data: Document) -> ObjectId:
        return await self._resolve_service(kind).create_document(data)

    async def update_document(self, kind: CatalogKind, document_id: str, data: Document) -> None:
        await self._resolve_service(kind).update_document(document_id, data)

    async def delete_document(self, kind: CatalogKind, document_id: str) -> None:
        await self._resolve_service(kind).delete_document(document_id)

    # === Private resolver methods ===
    def _resolve_service(self, kind: CatalogKind) -> DocumentService:
        services = self._core.services
        match kind:
            case CatalogKind.MOVIE:
                return services.movie
            case CatalogKind.COMMENT:
                return services.comment
            case CatalogKind.THEATER:
                return services.theater
