from mflix.core.modules.catalog.models import CatalogKind, Document
from mflix.core.modules.catalog.service import DocumentService
from mflix.errors import ValidationError


class TheaterService(DocumentService):
    collection_name = "theaters"
    kind = CatalogKind.THEATER

    def prepare_create(self, data: Document) -> Document:
        if not data.get("theaterId") or not data.get("location"):
            raise ValidationError("Invalid request body", "Missing required fields: theaterId and location")
        return dict(data)
