"""Test data shared across unit tests."""

from config.settings import Settings

API_KEY = "test-key-1"
NODE_A = "addr1qxyzqpzry9x8gf2tvdw0s3jn54khce6mua7lqpzry9x8gf2tvdw0s3jn54khce6mua7l"
NODE_B = "addr_test1qpzry9x8gf2tvdw0s3jn54khce6mua7lqpzry9x8gf2tvdw0s3jn54khce6mua7l"
REWARD_ADDRESS = "addr1qyl7zry9x8gf2tvdw0s3jn54khce6mua7lqpzry9x8gf2tvdw0s3jn54khce6mua7l"
TOKEN_POLICY = "8e51398904a5d3fc129fbf4f1589701de23c7824d5c90fdb9490e15a"


def settings_data(**overrides) -> dict:
    values = dict(
        database={
            "host": "localhost",
            "port": 5432,
            "database": "cexplorer",
            "user": "reader",
            "password": "secret",
        },
        api_keys=[API_KEY, "test-key-2"],
        ada_threshold=500_000_000,
        nodes=[
            {"address": NODE_A, "pair": "ADA-USD"},
            {"address": NODE_B, "pair": "ADA-C3"},
        ],
        reward_address=REWARD_ADDRESS,
        token_policy=TOKEN_POLICY,
        price_provider={"type": "coingecko", "token_id": "charli3"},
        debug=False,
    )
    values.update(overrides)
    return values


def make_settings(**overrides) -> Settings:
    return Settings(**settings_data(**overrides))
