from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer


class Envelope(BaseModel):
    """Standard response format. `status` mirrors the HTTP status code."""

    status: int = Field(..., description="HTTP status code")
    message: str | None = Field(None, description="Human-readable message")
    data: Any = Field(None, description="Response payload")
    error: str | None = Field(None, description="Error detail")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"status": 200, "data": {"token": "eyJhbGciOi..."}},
                {"status": 400, "message": "Invalid movie ID", "error": "ID format is incorrect"},
                {"status": 401, "message": "Missing token"},
            ]
        }
    }

    @model_serializer(mode="wrap")
    def omit_absent_keys(self, handler: SerializerFunctionWrapHandler):  # type: ignore[no-untyped-def]
        # Only top-level keys are dropped, None values inside documents are kept
        return {key: value for key, value in handler(self).items() if value is not None}


def encode_documents(value: Any) -> Any:
    """Make MongoDB documents JSON-safe: ObjectIds become hex strings."""
    return jsonable_encoder(value, custom_encoder={ObjectId: str})


def create_envelope_response(
    status_code: int, message: str | None = None, error: str | None = None, data: Any = None
) -> JSONResponse:
    envelope = Envelope(status=status_code, message=message, error=error, data=encode_documents(data))
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))
