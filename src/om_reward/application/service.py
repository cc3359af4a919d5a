"""RewardApplicationService: token balance and price for the configured reward pair."""

from src.om_common.datetime_utils import isoformat_z, utc_now
from src.om_indexer.domain.repository import IndexerRepositoryProtocol
from src.om_pricing.application.service import PriceService
from src.om_reward.application.schemas import PriceResponse, RewardBalanceResponse


class RewardApplicationService:
    def __init__(
        self,
        repo: IndexerRepositoryProtocol,
        price_service: PriceService,
        reward_address: str,
        token_policy: str,
        token_id: str,
    ) -> None:
        self._repo = repo
        self._prices = price_service
        self._address = reward_address
        self._policy = token_policy
        self._token_id = token_id

    async def get_balance(self) -> RewardBalanceResponse:
        balance = await self._repo.get_token_balance(self._address, self._policy)
        return RewardBalanceResponse(
            address=self._address,
            policy_id=self._policy,
            balance=str(balance),
        )

    async def get_price(self) -> PriceResponse:
        price = await self._prices.get_price(self._token_id)
        return PriceResponse(
            token_id=self._token_id,
            price=price,
            provider=self._prices.provider_name,
            timestamp=isoformat_z(utc_now()),
        )
