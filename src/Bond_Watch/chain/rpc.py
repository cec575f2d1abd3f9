"""Ethereum JSON-RPC client over httpx, limited to read-only calls."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Final

import httpx

from Bond_Watch.utils.exceptions import ContractCallError, RateLimitExceededError
from Bond_Watch.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RPC_SOURCE: Final[str] = "rpc"
HTTP_OK: Final[int] = 200
HTTP_TOO_MANY_REQUESTS: Final[int] = 429
DEFAULT_BLOCK_TAG: Final[str] = "latest"


def build_http_client() -> httpx.AsyncClient:
    """Shared httpx client settings for JSON-RPC and price API traffic."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0),
        limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
    )


class JsonRpcClient:
    """Minimal JSON-RPC 2.0 client for one Ethereum endpoint.

    Usage::

        rpc = JsonRpcClient("https://eth.llamarpc.com", rate_limiter=RateLimiter())
        data = await rpc.eth_call(to=depository, data=encode_call("liveMarkets()"))
        await rpc.aclose()
    """

    def __init__(
        self,
        url: str,
        *,
        rate_limiter: RateLimiter,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._rate_limiter = rate_limiter
        self._owns_client = client is None
        self._client = client if client is not None else build_http_client()
        self._request_ids = itertools.count(1)

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result``.

        Raises:
            RateLimitExceededError: On HTTP 429.
            ContractCallError: On transport failure, a non-200 status, a
                JSON-RPC error object, or a response without ``result``.
        """
        request_id = next(self._request_ids)
        payload = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}

        try:
            async with self._rate_limiter:
                response = await self._client.post(self._url, json=payload)
        except httpx.HTTPError as exc:
            raise ContractCallError(
                f"{method} request failed: {exc}",
                source=RPC_SOURCE,
            ) from exc

        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitExceededError(
                f"{method} rate limited by RPC endpoint",
                source=RPC_SOURCE,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.status_code != HTTP_OK:
            raise ContractCallError(
                f"{method} returned HTTP {response.status_code}",
                source=RPC_SOURCE,
                http_status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ContractCallError(f"{method} returned invalid JSON", source=RPC_SOURCE) from exc

        if not isinstance(body, dict):
            raise ContractCallError(f"{method} returned a non-object body", source=RPC_SOURCE)
        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ContractCallError(f"{method} failed: {message}", source=RPC_SOURCE)
        if "result" not in body:
            raise ContractCallError(f"{method} response has no result", source=RPC_SOURCE)

        logger.debug("RPC %s #%d ok", method, request_id)
        return body["result"]

    async def eth_call(self, *, to: str, data: str, block: str = DEFAULT_BLOCK_TAG) -> str:
        """Execute a read-only contract call and return the raw hex result."""
        result = await self.call("eth_call", [{"to": to, "data": data}, block])
        if not isinstance(result, str):
            raise ContractCallError(
                f"eth_call to {to} returned {type(result).__name__}, expected hex string",
                source=RPC_SOURCE,
            )
        return result
