"""PriceService: cache-aside wrapper around a PriceProvider.

Hit: return the cached value, no outbound call.
Miss: one provider call; only successful prices are stored.

Concurrent misses for the same cold key are not coalesced: each one calls the
provider, and the last to finish overwrites the entry.
"""

import logging

from src.om_pricing.domain.cache import CacheStats, TTLCache
from src.om_pricing.domain.provider import PriceProvider

logger = logging.getLogger("om.pricing")


class PriceService:
    def __init__(self, provider: PriceProvider, cache: TTLCache[float]) -> None:
        self._provider = provider
        self._cache = cache

    @property
    def provider_name(self) -> str:
        return self._provider.name

    @property
    def cache(self) -> TTLCache[float]:
        return self._cache

    async def get_price(self, token_id: str) -> float:
        cached = self._cache.get(token_id)
        if cached is not None:
            logger.info("Price cache hit token=%s price=%s", token_id, cached)
            return cached

        logger.info("Price cache miss token=%s, fetching from %s", token_id, self.provider_name)
        price = await self._provider.get_price(token_id)
        self._cache.set(token_id, price)
        logger.info("Price cached token=%s price=%s", token_id, price)
        return price

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Price cache cleared")

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()
