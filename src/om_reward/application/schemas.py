"""Pydantic schemas for om_reward API responses."""

from src.om_common.response import CamelModel


class RewardBalanceResponse(CamelModel):
    address: str
    policy_id: str
    balance: str  # token quantity, decimal string


class PriceResponse(CamelModel):
    token_id: str
    price: float
    currency: str = "USD"
    provider: str
    timestamp: str
