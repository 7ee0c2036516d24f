"""Sui JSON-RPC client — the concrete market state source.

Only the two read calls the state reader needs are implemented:
  sui_getObject               (showContent) -> market object fields
  suix_getDynamicFieldObject  (u64 key)     -> one bucket-table row

HTTP failures and JSON-RPC errors raise StateSourceError; there are no
retries here, callers own retry / timeout policy.
"""

import itertools
import logging
from typing import Any

import httpx

from config.settings import settings
from src.pm_common.errors import StateSourceError

logger = logging.getLogger(__name__)


def _content_fields(result: Any) -> dict[str, Any] | None:
    """result.data.content.fields, or None for a missing / non-Move object."""
    if not isinstance(result, dict):
        return None
    data = result.get("data")
    if not data:
        return None
    content = data.get("content")
    if not isinstance(content, dict) or "fields" not in content:
        return None
    return content["fields"]


class SuiRpcClient:
    """Implements MarketStateSourceProtocol over a shared httpx.AsyncClient."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            resp = await self._http.post(self._url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPError as exc:
            raise StateSourceError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise StateSourceError(f"{method} returned invalid JSON") from exc

        if body.get("error"):
            error = body["error"]
            raise StateSourceError(f"{method} error {error.get('code')}: {error.get('message')}")
        return body.get("result")

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        result = await self._call("sui_getObject", [object_id, {"showContent": True}])
        return _content_fields(result)

    async def get_dynamic_field(
        self, parent_id: str, name_type: str, name_value: str
    ) -> dict[str, Any] | None:
        result = await self._call(
            "suix_getDynamicFieldObject",
            [parent_id, {"type": name_type, "value": name_value}],
        )
        return _content_fields(result)

    async def close(self) -> None:
        await self._http.aclose()


_client: SuiRpcClient | None = None


def get_sui_client() -> SuiRpcClient:
    """Get or create the process-wide RPC client (FastAPI dependency)."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = SuiRpcClient(settings.SUI_RPC_URL, timeout=settings.SUI_RPC_TIMEOUT_SECONDS)
        logger.info("Sui RPC client created for %s", settings.SUI_RPC_URL)
    return _client


async def close_sui_client() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.close()
        _client = None
