from typing import Annotated, Any, Self

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pymongo.asynchronous.cursor import AsyncCursor

from mflix.errors import ValidationError

PyObjectId = Annotated[ObjectId, PlainSerializer(str, return_type=str, when_used="json")]


class MongoModel(BaseModel):
    id: PyObjectId = Field(alias="_id", serialization_alias="id", default_factory=ObjectId)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


def parse_object_id(value: str, kind: str) -> ObjectId:
    """Parse a path identifier into an ObjectId.

    Raises:
        ValidationError: If the value is not a 24-character hex string.
    """
    if not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {kind} ID", "ID format is incorrect")
    return ObjectId(value)
