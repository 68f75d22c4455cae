from mflix.core.modules.catalog.models import CatalogKind
from mflix.core.modules.catalog.service import DocumentService


class MovieService(DocumentService):
    """Movies accept any JSON object on create and update."""

    collection_name = "movies"
    kind = CatalogKind.MOVIE
