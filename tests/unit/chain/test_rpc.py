"""Tests for JsonRpcClient using httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from Bond_Watch.chain.rpc import JsonRpcClient
from Bond_Watch.utils.exceptions import ContractCallError, RateLimitExceededError
from Bond_Watch.utils.rate_limiter import RateLimiter

RPC_URL = "https://rpc.test"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> JsonRpcClient:
    return JsonRpcClient(
        RPC_URL,
        rate_limiter=RateLimiter(max_concurrent=4, requests_per_second=1000.0),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _result(result: object) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})

    return handler


class TestEthCall:
    @pytest.mark.asyncio()
    async def test_sends_eth_call_payload(self) -> None:
        seen: list[dict[str, object]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            seen.append(payload)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": "0x01"})

        rpc = _client(handler)
        result = await rpc.eth_call(to="0xabc", data="0x18160ddd")

        assert result == "0x01"
        assert seen[0]["method"] == "eth_call"
        assert seen[0]["params"] == [{"to": "0xabc", "data": "0x18160ddd"}, "latest"]
        assert seen[0]["jsonrpc"] == "2.0"

    @pytest.mark.asyncio()
    async def test_request_ids_increase(self) -> None:
        ids: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            ids.append(payload["id"])
            return httpx.Response(200, json={"id": payload["id"], "result": "0x"})

        rpc = _client(handler)
        await rpc.eth_call(to="0xabc", data="0x")
        await rpc.eth_call(to="0xabc", data="0x")
        assert ids == [1, 2]

    @pytest.mark.asyncio()
    async def test_non_string_result_raises(self) -> None:
        rpc = _client(_result(None))
        with pytest.raises(ContractCallError, match="expected hex string"):
            await rpc.eth_call(to="0xabc", data="0x")


class TestCallErrors:
    @pytest.mark.asyncio()
    async def test_json_rpc_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"id": 1, "error": {"code": -32000, "message": "execution reverted"}}
            )

        with pytest.raises(ContractCallError, match="execution reverted") as exc_info:
            await _client(handler).call("eth_call", [])
        assert exc_info.value.source == "rpc"

    @pytest.mark.asyncio()
    async def test_missing_result_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": 1})

        with pytest.raises(ContractCallError, match="no result"):
            await _client(handler).call("eth_blockNumber", [])

    @pytest.mark.asyncio()
    async def test_invalid_json_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>bad gateway</html>")

        with pytest.raises(ContractCallError, match="invalid JSON"):
            await _client(handler).call("eth_blockNumber", [])

    @pytest.mark.asyncio()
    async def test_http_error_status_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        with pytest.raises(ContractCallError) as exc_info:
            await _client(handler).call("eth_blockNumber", [])
        assert exc_info.value.http_status == 503

    @pytest.mark.asyncio()
    async def test_rate_limited_carries_retry_after(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"Retry-After": "3"})

        with pytest.raises(RateLimitExceededError) as exc_info:
            await _client(handler).call("eth_call", [])
        assert exc_info.value.retry_after == 3.0
        assert exc_info.value.http_status == 429

    @pytest.mark.asyncio()
    async def test_transport_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(ContractCallError, match="request failed"):
            await _client(handler).call("eth_call", [])


class TestClientOwnership:
    @pytest.mark.asyncio()
    async def test_shared_client_is_not_closed(self) -> None:
        shared = httpx.AsyncClient(transport=httpx.MockTransport(_result("0x")))
        rpc = JsonRpcClient(RPC_URL, rate_limiter=RateLimiter(), client=shared)
        await rpc.aclose()
        assert shared.is_closed is False
        await shared.aclose()

    @pytest.mark.asyncio()
    async def test_owned_client_is_closed(self) -> None:
        rpc = JsonRpcClient(RPC_URL, rate_limiter=RateLimiter())
        await rpc.aclose()
        assert rpc._client.is_closed is True
