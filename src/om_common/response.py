"""Response models shared by all routers.

Success bodies are plain camelCase JSON objects (no envelope) so the polling
client can read them directly. Errors use ErrorResponse.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.om_common.errors import GENERIC_INTERNAL_MESSAGE, AppError


class CamelModel(BaseModel):
    """Base for response schemas: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict[str, Any] | None = None


def error_response(exc: AppError, debug: bool = False) -> ErrorResponse:
    message = exc.message
    if exc.internal and not debug:
        message = GENERIC_INTERNAL_MESSAGE
    return ErrorResponse(error=exc.error, message=message, details=exc.details)


def error_body(exc: AppError, debug: bool = False) -> dict[str, Any]:
    """Serialized error body; `details` is omitted when absent."""
    return error_response(exc, debug).model_dump(exclude_none=True)
