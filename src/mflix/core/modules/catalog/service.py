from typing import Any, ClassVar

import structlog
from bson import ObjectId
from pymongo.asynchronous.database import AsyncDatabase

from mflix.core.core import Service
from mflix.core.db import parse_object_id
from mflix.core.modules.catalog.models import Document, Page
from mflix.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class DocumentService(Service):
    """Pass-through CRUD over one content collection.

    Identifiers are parsed before any store access, so malformed ids never reach
    the database. Subclasses adjust create and update payloads.
    """

    collection_name: ClassVar[str]
    kind: ClassVar[str]

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection(self.collection_name)

    async def list_documents(self, page: Page) -> list[Document]:
        cursor = self._collection.find({}).skip(page.offset).limit(page.limit)
        return [doc async for doc in cursor]

    async def get_document(self, document_id: str) -> Document:
        oid = parse_object_id(document_id, self.kind)
        doc = await self._collection.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(f"{self.kind.capitalize()} not found", f"No {self.kind} found with the given ID")
        return doc

    async def create_document(self, data: Document) -> ObjectId:
        if "_id" in data:
            raise ValidationError("Invalid request body", "_id is assigned by the server")
        payload = self.prepare_create(data)
        result = await self._collection.insert_one(payload)
        logger.info("document_created", collection=self.collection_name, id=str(result.inserted_id))
        return result.inserted_id

    async def update_document(self, document_id: str, data: Document) -> None:
        oid = parse_object_id(document_id, self.kind)
        changes = self.prepare_update(data)
        result = await self._collection.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError(f"{self.kind.capitalize()} not found")
        logger.info("document_updated", collection=self.collection_name, id=document_id)

    async def delete_document(self, document_id: str) -> None:
        oid = parse_object_id(document_id, self.kind)
        result = await self._collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(f"{self.kind.capitalize()} not found")
        logger.info("document_deleted", collection=self.collection_name, id=document_id)

    def prepare_create(self, data: Document) -> Document:
        """Validate a create payload and return the document to insert."""
        return dict(data)

    def prepare_update(self, data: Document) -> Document:
        """Validate an update payload and return the fields to $set."""
        if not data:
            raise ValidationError("Invalid request body", "Body must be a non-empty JSON object")
        if "_id" in data:
            raise ValidationError("Invalid request body", "_id cannot be modified")
        return dict(data)
