from mflix.core.db import parse_object_id
from mflix.core.modules.catalog.models import CatalogKind, Document
from mflix.core.modules.catalog.service import DocumentService
from mflix.errors import ValidationError
from mflix.utils import now


class CommentService(DocumentService):
    """Comments reference a movie and only ever have their text edited."""

    collection_name = "comments"
    kind = CatalogKind.COMMENT

    def prepare_create(self, data: Document) -> Document:
        if not data.get("text"):
            raise ValidationError("Missing required field: text")
        movie_id = data.get("movie_id")
        if not isinstance(movie_id, str):
            raise ValidationError("Missing required field: movie_id")
        payload = dict(data)
        payload["movie_id"] = parse_object_id(movie_id, CatalogKind.MOVIE)
        payload.setdefault("date", now())
        return payload

    def prepare_update(self, data: Document) -> Document:
        if not data.get("text"):
            raise ValidationError("Missing required field: text")
        return {"text": data["text"]}
