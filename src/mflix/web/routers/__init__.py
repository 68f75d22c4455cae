from mflix.core.modules.catalog.models import CatalogKind
from mflix.web.routers.auth import router as auth_router
from mflix.web.routers.catalog import create_catalog_router

# Nested collections first: /movies/{document_id} would otherwise capture "comments"
comments_router = create_catalog_router(CatalogKind.COMMENT, "/movies/comments", "comments")
theaters_router = create_catalog_router(CatalogKind.THEATER, "/movies/theaters", "theaters")
movies_router = create_catalog_router(CatalogKind.MOVIE, "/movies", "movies")

__all__ = [
    "auth_router",
    "comments_router",
    "movies_router",
    "theaters_router",
]
