"""CoinGecko simple-price adapter.

GET {base_url}/simple/price?ids=<token_id>&vs_currencies=usd
-> {"<token_id>": {"usd": 0.42}}

One request per call; no retry. A 429 is raised as PriceRateLimitedError so
the caller can tell it apart from other failures.
"""

import logging
import math

import httpx

from config.settings import ConfigError, PriceProviderSettings
from src.om_pricing.domain.provider import (
    PriceNotFoundError,
    PriceProvider,
    PriceProviderError,
    PriceRateLimitedError,
)

logger = logging.getLogger("om.pricing")

API_KEY_HEADER = "x-cg-pro-api-key"


class CoinGeckoPriceProvider:
    name = "coingecko"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout_seconds

    async def get_price(self, token_id: str) -> float:
        headers = {API_KEY_HEADER: self._api_key} if self._api_key else {}
        try:
            response = await self._client.get(
                f"{self._base_url}/simple/price",
                params={"ids": token_id, "vs_currencies": "usd"},
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise PriceProviderError(token_id, f"CoinGecko API error: {exc}") from exc

        if response.status_code == 429:
            logger.error("CoinGecko rate limit exceeded token=%s status=429", token_id)
            raise PriceRateLimitedError(token_id, "CoinGecko")
        if response.is_error:
            raise PriceProviderError(
                token_id, f"CoinGecko API error: HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise PriceProviderError(token_id, "CoinGecko API error: invalid JSON") from exc

        return _extract_usd(payload, token_id)


def _extract_usd(payload: object, token_id: str) -> float:
    entry = payload.get(token_id) if isinstance(payload, dict) else None
    price = entry.get("usd") if isinstance(entry, dict) else None
    # bool is an int subclass; reject it explicitly
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise PriceNotFoundError(token_id)
    if not math.isfinite(price) or price <= 0:
        raise PriceNotFoundError(token_id)
    return float(price)


def create_price_provider(
    settings: PriceProviderSettings, client: httpx.AsyncClient
) -> PriceProvider:
    """Build the configured provider; unknown types are a configuration error."""
    if settings.type.lower() == CoinGeckoPriceProvider.name:
        return CoinGeckoPriceProvider(
            client,
            base_url=settings.base_url,
            api_key=settings.api_key,
            timeout_seconds=settings.timeout_seconds,
        )
    raise ConfigError(f"Unsupported price service type: {settings.type}")
