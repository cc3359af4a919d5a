"""Shared test fixtures.

The app is built with create_app() around fake dependencies: an AsyncMock
indexer repository and a real PriceService over a mocked provider. No
database or network is touched.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import create_app
from src.om_indexer.infrastructure.persistence import IndexerRepository
from src.om_pricing.application.service import PriceService
from src.om_pricing.domain.cache import TTLCache
from tests.factories import API_KEY, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock(spec=IndexerRepository)


@pytest.fixture
def provider() -> MagicMock:
    provider = MagicMock()
    provider.name = "coingecko"
    provider.get_price = AsyncMock(return_value=0.42)
    return provider


@pytest.fixture
def price_service(provider: MagicMock) -> PriceService:
    return PriceService(provider, TTLCache(ttl_seconds=300))


@pytest.fixture
def app(settings: Settings, repo: AsyncMock, price_service: PriceService):
    return create_app(settings, indexer_repository=repo, price_service=price_service)


@pytest.fixture
async def client(app) -> AsyncClient:
    """Unauthenticated async HTTP client for the app under test."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Client that sends a valid X-API-Key header."""
    client.headers.update({"X-API-Key": API_KEY})
    return client
