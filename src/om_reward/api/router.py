"""om_reward REST endpoints (mounted under /api, API key required).

GET /reward/balance : native-token balance of the reward address
GET /reward/price   : cached USD price of the reward token
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.om_common.errors import dependency_errors
from src.om_pricing.domain.provider import PriceRateLimitedError
from src.om_reward.application.schemas import PriceResponse, RewardBalanceResponse
from src.om_reward.application.service import RewardApplicationService

logger = logging.getLogger("om.api")

router = APIRouter(prefix="/reward", tags=["reward"])


def get_reward_service(request: Request) -> RewardApplicationService:
    return request.app.state.reward_service


@router.get("/balance", response_model=RewardBalanceResponse)
async def get_reward_balance(
    service: Annotated[RewardApplicationService, Depends(get_reward_service)],
) -> RewardBalanceResponse:
    with dependency_errors("fetching reward balance"):
        return await service.get_balance()


@router.get("/price", response_model=PriceResponse)
async def get_price(
    service: Annotated[RewardApplicationService, Depends(get_reward_service)],
) -> PriceResponse:
    with dependency_errors("fetching price"):
        try:
            return await service.get_price()
        except PriceRateLimitedError:
            logger.warning("Price provider is rate limiting; clients should back off")
            raise
