"""HTTP client for the monitor API, used by the terminal dashboard."""

from datetime import datetime
from typing import Any

import httpx

from src.om_common.datetime_utils import isoformat_z

DEFAULT_TIMEOUT_SECONDS = 30.0


class DashboardError(Exception):
    pass


class DashboardAuthError(DashboardError):
    """API key missing or rejected (401). Polling stops on this."""


class MonitorApiClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"X-API-Key": api_key},
            timeout=timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MonitorApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise DashboardError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == 401:
            raise DashboardAuthError(_error_message(response))
        if response.is_error:
            raise DashboardError(f"{path} → {response.status_code}: {_error_message(response)}")
        return response.json()

    def get_nodes(self) -> dict[str, Any]:
        return self._get("/nodes")

    def get_node_balance(self, address: str) -> dict[str, Any]:
        return self._get(f"/nodes/{address}/balance")

    def get_node_transactions(
        self,
        address: str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> dict[str, Any]:
        params: dict[str, str] = {}
        if from_date is not None:
            params["fromDate"] = isoformat_z(from_date)
        if to_date is not None:
            params["toDate"] = isoformat_z(to_date)
        return self._get(f"/nodes/{address}/transactions", params=params)

    def get_reward_balance(self) -> dict[str, Any]:
        return self._get("/reward/balance")

    def get_token_price(self) -> dict[str, Any]:
        return self._get("/reward/price")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
