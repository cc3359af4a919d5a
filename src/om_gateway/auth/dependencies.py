"""FastAPI dependency: require_api_key.

Applied at router level for everything under /api:
    app.include_router(router, prefix="/api", dependencies=[Depends(require_api_key)])

Router-level dependencies run before path/query validation, so an
unauthenticated request is rejected before any parameter is inspected.
"""

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from src.om_common.errors import InvalidApiKeyError, MissingApiKeyError

API_KEY_HEADER = "X-API-Key"

# auto_error=False: we raise our own 401 body instead of FastAPI's 403
api_key_scheme = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def get_api_keys(request: Request) -> frozenset[str]:
    return request.app.state.api_keys


async def require_api_key(
    request: Request,
    api_key: str | None = Depends(api_key_scheme),
) -> str:
    """Raise 401 if the X-API-Key header is missing or not a configured key."""
    if not api_key:
        raise MissingApiKeyError()
    if api_key not in get_api_keys(request):
        raise InvalidApiKeyError()
    return api_key
