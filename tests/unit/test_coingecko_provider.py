"""Unit tests for CoinGeckoPriceProvider using httpx.MockTransport."""

import httpx
import pytest

from config.settings import ConfigError, PriceProviderSettings
from src.om_pricing.domain.provider import (
    PriceNotFoundError,
    PriceProviderError,
    PriceRateLimitedError,
)
from src.om_pricing.infrastructure.coingecko import (
    CoinGeckoPriceProvider,
    create_price_provider,
)


def _provider(handler, api_key: str | None = None) -> CoinGeckoPriceProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CoinGeckoPriceProvider(client, base_url="https://cg.test/api/v3", api_key=api_key)


class TestGetPrice:
    async def test_returns_usd_price(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"cardano": {"usd": 0.42}})

        price = await _provider(handler).get_price("cardano")

        assert price == 0.42
        assert len(seen) == 1
        assert seen[0].url.path == "/api/v3/simple/price"
        assert seen[0].url.params["ids"] == "cardano"
        assert seen[0].url.params["vs_currencies"] == "usd"
        assert "x-cg-pro-api-key" not in seen[0].headers

    async def test_sends_api_key_header_when_configured(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"cardano": {"usd": 1}})

        await _provider(handler, api_key="pro-key").get_price("cardano")

        assert seen[0].headers["x-cg-pro-api-key"] == "pro-key"

    async def test_integer_price_accepted(self):
        provider = _provider(lambda r: httpx.Response(200, json={"cardano": {"usd": 2}}))
        assert await provider.get_price("cardano") == 2.0

    @pytest.mark.parametrize(
        "payload",
        [
            {"cardano": {}},
            {"cardano": {"usd": "0.42"}},
            {"cardano": {"usd": None}},
            {"cardano": {"usd": True}},
            {"cardano": {"usd": 0}},
            {"cardano": {"usd": -1.5}},
            {"other": {"usd": 0.42}},
            {},
            [],
        ],
    )
    async def test_missing_or_bad_price_is_not_found(self, payload):
        provider = _provider(lambda r: httpx.Response(200, json=payload))

        with pytest.raises(PriceNotFoundError) as exc_info:
            await provider.get_price("cardano")

        assert str(exc_info.value) == "Price not found for token: cardano"

    async def test_429_is_rate_limited(self):
        provider = _provider(lambda r: httpx.Response(429, json={"status": "throttled"}))

        with pytest.raises(PriceRateLimitedError):
            await provider.get_price("cardano")

    async def test_rate_limit_is_a_provider_error(self):
        assert issubclass(PriceRateLimitedError, PriceProviderError)
        assert not issubclass(PriceRateLimitedError, PriceNotFoundError)

    async def test_server_error(self):
        provider = _provider(lambda r: httpx.Response(502, text="bad gateway"))

        with pytest.raises(PriceProviderError) as exc_info:
            await provider.get_price("cardano")

        assert not isinstance(exc_info.value, PriceRateLimitedError)
        assert "502" in str(exc_info.value)

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(PriceProviderError):
            await _provider(handler).get_price("cardano")

    async def test_invalid_json(self):
        provider = _provider(lambda r: httpx.Response(200, text="<html>"))

        with pytest.raises(PriceProviderError):
            await provider.get_price("cardano")


class TestFactory:
    def test_coingecko_case_insensitive(self):
        settings = PriceProviderSettings(type="CoinGecko", token_id="cardano")
        provider = create_price_provider(settings, httpx.AsyncClient())
        assert isinstance(provider, CoinGeckoPriceProvider)

    def test_unknown_type_is_config_error(self):
        settings = PriceProviderSettings(type="binance", token_id="cardano")
        with pytest.raises(ConfigError, match="Unsupported price service type"):
            create_price_provider(settings, httpx.AsyncClient())
