"""FastAPI application entry point.

Run with: om-api                       (reads CONFIG_PATH, default ./config.yaml)
     or: uvicorn src.main:app_from_env --factory --port 4000

Configuration is loaded once and handed to create_app(); a configuration
error aborts startup with exit status 1.
"""

import asyncio
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import ConfigError, Settings, load_settings
from src.om_common.database import create_indexer_engine
from src.om_common.errors import (
    AppError,
    DependencyError,
    RouteNotFoundError,
    ValidationFailedError,
    validation_details,
)
from src.om_common.logging_config import configure_logging
from src.om_common.response import error_body
from src.om_gateway.api.health_router import router as health_router
from src.om_gateway.auth.dependencies import require_api_key
from src.om_gateway.middleware.request_log import RequestLogMiddleware
from src.om_indexer.domain.repository import IndexerRepositoryProtocol
from src.om_indexer.infrastructure.persistence import IndexerRepository
from src.om_nodes.api.router import router as nodes_router
from src.om_nodes.application.service import NodeApplicationService
from src.om_pricing.application.service import PriceService
from src.om_pricing.domain.cache import TTLCache
from src.om_pricing.infrastructure.coingecko import create_price_provider
from src.om_reward.api.router import router as reward_router
from src.om_reward.application.service import RewardApplicationService

logger = logging.getLogger("om.app")

VERSION = "0.1.0"


async def _sweep_cache(cache: TTLCache[float], interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        dropped = cache.sweep()
        if dropped:
            logger.debug("Swept %d expired price entries", dropped)


def create_app(
    settings: Settings,
    indexer_repository: IndexerRepositoryProtocol | None = None,
    price_service: PriceService | None = None,
) -> FastAPI:
    """Wire repositories and services from an explicit Settings object.

    Tests pass fakes for indexer_repository / price_service; in production both
    are built here from settings.
    """
    http_client: httpx.AsyncClient | None = None
    if indexer_repository is None:
        indexer_repository = IndexerRepository(
            create_indexer_engine(settings.database, echo=settings.debug)
        )
    if price_service is None:
        http_client = httpx.AsyncClient()
        price_service = PriceService(
            create_price_provider(settings.price_provider, http_client),
            TTLCache(ttl_seconds=settings.price_provider.cache_ttl_seconds),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: verify DB + start cache sweep. Shutdown: dispose."""
        if not await indexer_repository.ping():
            raise RuntimeError("Failed to connect to database")
        logger.info("Database connected")
        sweeper = asyncio.create_task(
            _sweep_cache(price_service.cache, price_service.cache.ttl_seconds * 0.2)
        )
        yield
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        await indexer_repository.close()
        if http_client is not None:
            await http_client.aclose()

    app = FastAPI(title=settings.app_name, version=VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.api_keys = frozenset(settings.api_keys)
    app.state.indexer_repository = indexer_repository
    app.state.price_service = price_service
    app.state.node_service = NodeApplicationService(
        indexer_repository, settings.nodes, settings.ada_threshold
    )
    app.state.reward_service = RewardApplicationService(
        indexer_repository,
        price_service,
        reward_address=settings.reward_address,
        token_policy=settings.token_policy,
        token_id=settings.price_provider.token_id,
    )

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=settings.cors_origin != "*",
        allow_methods=["GET"],
        allow_headers=["X-API-Key", "Content-Type"],
    )

    _register_error_handlers(app, debug=settings.debug)

    app.include_router(health_router)
    protected = [Depends(require_api_key)]
    app.include_router(nodes_router, prefix="/api", dependencies=protected)
    app.include_router(reward_router, prefix="/api", dependencies=protected)
    return app


def _register_error_handlers(app: FastAPI, debug: bool) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.http_status, content=error_body(exc, debug))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        err = ValidationFailedError(validation_details(exc.errors()))
        return JSONResponse(status_code=err.http_status, content=error_body(err, debug))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404:
            err = RouteNotFoundError(request.url.path)
        else:
            err = AppError(str(exc.detail), str(exc.detail), exc.status_code)
        return JSONResponse(
            status_code=err.http_status,
            content=error_body(err, debug),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
        err = DependencyError(str(exc) or type(exc).__name__)
        return JSONResponse(status_code=500, content=error_body(err, debug))


def app_from_env() -> FastAPI:
    """uvicorn --factory target: load config from CONFIG_PATH and build the app."""
    settings = load_settings()
    configure_logging(settings.service_log_level, settings.http_log_level)
    return create_app(settings)


def main() -> None:
    try:
        settings = load_settings()
        configure_logging(settings.service_log_level, settings.http_log_level)
        # Building the app resolves the price provider type, also a config failure.
        app = create_app(settings)
    except ConfigError as exc:
        configure_logging()
        logger.error("Failed to start server: %s", exc)
        sys.exit(1)

    logger.info("Configuration loaded; debug=%s", settings.debug)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        loop="uvloop",
        log_config=None,
    )


if __name__ == "__main__":
    main()
