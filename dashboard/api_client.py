from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Tuple

import httpx

from dashboard.config import DEFAULT_API_BASE, dlog
from dashboard.errors import ApiRequestError, NetworkError
from dashboard.models import KeyUsageSnapshot, ServiceStatus, UsageHistory


AUTH_FAILED_MESSAGE = "API request failed. Please check your token."


class MapleApiClient:
    """Async client for the three read-only Maple API endpoints."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_json(self, path: str, headers: Dict[str, str], failure_message: str) -> Any:
        dlog("maple_request", {"url": f"{self._base_url}{path}", "auth": "Authorization" in headers})
        try:
            resp = await self._client.get(path, headers=headers)
        except httpx.HTTPError as e:
            raise NetworkError(f"Could not reach {self._base_url}: {e}", endpoint=path) from e

        if resp.status_code >= 400:
            dlog("maple_response_error", {"path": path, "status": resp.status_code, "body": resp.text[:256]})
            raise ApiRequestError(failure_message, status_code=resp.status_code, endpoint=path)

        try:
            data = resp.json()
        except ValueError as e:
            raise ApiRequestError(f"Invalid JSON from {path}: {e}", status_code=resp.status_code, endpoint=path) from e
        dlog("maple_response", {"path": path, "status": resp.status_code})
        return data

    async def get_status(self) -> ServiceStatus:
        data = await self._get_json("/", {"Accept": "application/json"}, "Service unavailable")
        return ServiceStatus.from_json(data)

    async def get_key_info(self, token: str) -> KeyUsageSnapshot:
        data = await self._get_json("/v1/key-info", _bearer(token), AUTH_FAILED_MESSAGE)
        return KeyUsageSnapshot.from_json(data)

    async def get_usage_history(self, token: str) -> UsageHistory:
        data = await self._get_json("/v1/usage-history", _bearer(token), AUTH_FAILED_MESSAGE)
        return UsageHistory.from_json(data)

    async def get_usage(self, token: str) -> Tuple[KeyUsageSnapshot, UsageHistory]:
        """Fetch key info and usage history concurrently; either failure fails both."""
        key_info, history = await asyncio.gather(
            self.get_key_info(token),
            self.get_usage_history(token),
            return_exceptions=True,
        )
        # Both requests have settled; key-info errors take precedence.
        for result in (key_info, history):
            if isinstance(result, BaseException):
                raise result
        return key_info, history

    async def aclose(self) -> None:
        await self._client.aclose()


def _bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}", "Accept": "application/json"}
