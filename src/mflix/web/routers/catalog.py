"""CRUD endpoints shared by the movie, comment and theater collections."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from mflix.core.modules.catalog.models import CatalogKind
from mflix.errors import MethodNotAllowedError
from mflix.web.deps import AppDep, PageDep
from mflix.web.responses import Envelope, encode_documents

DocumentBody = Annotated[dict[str, Any], Body(description="JSON object")]


async def method_not_allowed(request: Request) -> None:
    raise MethodNotAllowedError(request.method)


def create_catalog_router(kind: CatalogKind, path: str, tag: str) -> APIRouter:
    """Build list/create/get/update/delete routes for one collection under `path`."""
    router = APIRouter(tags=[tag])
    title = kind.capitalize()
    item_path = f"{path}/{{document_id}}"

    @router.get(
        path,
        summary=f"List {kind}s",
        description=f"Return a page of {kind}s (10 by default).",
        operation_id=f"list{title}s",
        responses={400: {"model": Envelope, "description": "Invalid paging parameters"}},
    )
    async def list_documents(app: AppDep, page: PageDep) -> Envelope:
        documents = await app.list_documents(kind, page)
        return Envelope(status=200, data=encode_documents(documents))

    @router.post(
        path,
        summary=f"Create {kind}",
        description=f"Insert a new {kind} document.",
        operation_id=f"create{title}",
        status_code=201,
        responses={
            201: {"description": f"{title} created"},
            400: {"model": Envelope, "description": "Invalid request body"},
        },
    )
    async def create_document(data: DocumentBody, app: AppDep) -> Envelope:
        inserted_id = await app.create_document(kind, data)
        return Envelope(
            status=201, message=f"{title} created successfully", data={"insertedId": str(inserted_id)}
        )

    @router.get(
        item_path,
        summary=f"Get {kind}",
        description=f"Retrieve a {kind} by its ObjectId.",
        operation_id=f"get{title}",
        responses={
            400: {"model": Envelope, "description": f"Invalid {kind} ID format"},
            404: {"model": Envelope, "description": f"{title} not found"},
        },
    )
    async def get_document(document_id: str, app: AppDep) -> Envelope:
        document = await app.get_document(kind, document_id)
        return Envelope(status=200, data={kind.value: encode_documents(document)})

    @router.put(
        item_path,
        summary=f"Update {kind}",
        description=f"Set the given fields on a {kind}.",
        operation_id=f"update{title}",
        responses={
            400: {"model": Envelope, "description": f"Invalid {kind} ID format or body"},
            404: {"model": Envelope, "description": f"{title} not found"},
        },
    )
    async def update_document(document_id: str, data: DocumentBody, app: AppDep) -> Envelope:
        await app.update_document(kind, document_id, data)
        return Envelope(status=200, message=f"{title} updated successfully")

    @router.delete(
        item_path,
        summary=f"Delete {kind}",
        description=f"Delete a {kind} by its ObjectId.",
        operation_id=f"delete{title}",
        responses={
            400: {"model": Envelope, "description": f"Invalid {kind} ID format"},
            404: {"model": Envelope, "description": f"{title} not found"},
        },
    )
    async def delete_document(document_id: str, app: AppDep) -> Envelope:
        await app.delete_document(kind, document_id)
        return Envelope(status=200, message=f"{title} deleted successfully")

    # Declared explicitly so a nested collection path never falls through to a parent item route
    router.add_api_route(path, method_not_allowed, methods=["PUT", "DELETE", "PATCH"], include_in_schema=False)
    router.add_api_route(item_path, method_not_allowed, methods=["POST", "PATCH"], include_in_schema=False)

    return router
