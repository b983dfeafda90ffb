"""Error body shared by every API route."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Body returned for every 4xx and 5xx response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "TICKET_NOT_FOUND",
                "message": "Ticket not found: 123e4567-e89b-12d3-a456-426614174000",
                "details": {"ticket_id": "123e4567-e89b-12d3-a456-426614174000"},
            }
        }
    )

    error_code: str
    message: str
    details: Any | None = None
