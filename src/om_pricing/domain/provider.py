"""Price provider contract.

One implementation today (CoinGecko). Callers depend on the Protocol only.
"""

from typing import Protocol


class PriceProviderError(Exception):
    """Provider could not supply a price."""

    def __init__(self, token_id: str, message: str) -> None:
        self.token_id = token_id
        super().__init__(message)


class PriceNotFoundError(PriceProviderError):
    def __init__(self, token_id: str) -> None:
        super().__init__(token_id, f"Price not found for token: {token_id}")


class PriceRateLimitedError(PriceProviderError):
    """HTTP 429 from the provider. Not retried here; backoff is the caller's call."""

    def __init__(self, token_id: str, provider: str) -> None:
        super().__init__(token_id, f"{provider} rate limit exceeded for token: {token_id}")


class PriceProvider(Protocol):
    name: str

    async def get_price(self, token_id: str) -> float:
        """USD price, strictly positive. Raises PriceProviderError."""
        ...
