"""Unified API errors.

Every AppError renders as a JSON body:
{
    "error": "Unauthorized",     // short category label
    "message": "...",            // human-readable detail
    "details": { ... }           // validation errors only
}

Status mapping:
  400: validation
  401: authentication
  404: unmatched route
  500: database / price provider failure (detail hidden unless debug)
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

logger = logging.getLogger("om.api")

GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred"


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        error: str,
        message: str,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
        internal: bool = False,
    ) -> None:
        self.error = error
        self.message = message
        self.http_status = http_status
        self.details = details
        # internal=True: message is replaced by a generic string outside debug mode
        self.internal = internal
        super().__init__(message)


# --- 400: Validation ---

class ValidationFailedError(AppError):
    def __init__(self, details: dict[str, list[str]]) -> None:
        fields = ", ".join(sorted(details))
        super().__init__(
            "Validation failed",
            f"Invalid request parameters: {fields}",
            400,
            details=details,
        )


# --- 401: Auth ---

class MissingApiKeyError(AppError):
    def __init__(self) -> None:
        super().__init__(
            "Unauthorized",
            "API key is required. Please provide it in the X-API-Key header.",
            401,
        )


class InvalidApiKeyError(AppError):
    def __init__(self) -> None:
        super().__init__("Unauthorized", "Invalid API key.", 401)


# --- 404 ---

class RouteNotFoundError(AppError):
    def __init__(self, path: str) -> None:
        super().__init__("Not found", f"No route matches {path}", 404)


# --- 500: Dependencies ---

class DependencyError(AppError):
    """Database or price provider failure surfaced to the client."""

    def __init__(self, detail: str) -> None:
        super().__init__("Internal server error", detail, 500, internal=True)


def validation_details(errors: Sequence[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic/FastAPI error dicts by field name (last loc element)."""
    details: dict[str, list[str]] = {}
    for err in errors:
        loc = err.get("loc") or ()
        field = str(loc[-1]) if loc else "request"
        msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        details.setdefault(field, []).append(msg)
    return details


@contextmanager
def dependency_errors(operation: str) -> Iterator[None]:
    """Turn any non-AppError raised by the database or price provider into a 500.

    Usage in a route handler:
        with dependency_errors("fetching nodes"):
            return await service.list_nodes()
    """
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.error("Error %s: %s", operation, exc, exc_info=exc)
        raise DependencyError(str(exc) or type(exc).__name__) from exc
