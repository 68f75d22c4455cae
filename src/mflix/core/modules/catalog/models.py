from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

Document = dict[str, Any]


class CatalogKind(StrEnum):
    """Content collections exposed over the API."""

    MOVIE = "movie"
    COMMENT = "comment"
    THEATER = "theater"


class Page(BaseModel):
    """Window into a collection listing."""

    limit: int = Field(10, ge=1, le=100)
    offset: int = Field(0, ge=0)
