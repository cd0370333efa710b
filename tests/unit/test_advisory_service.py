import json

import httpx
import pytest

from p2p_desk.services.advisory_service import (
    FALLBACK_EMPTY,
    FALLBACK_ERROR,
    FALLBACK_NO_KEY,
    AdvisoryGateway,
    build_prompt,
)

TRADE = dict(buy_price=18.0, sell_price=18.5, amount=1000.0, profit=500.0, roi=2.7778)


def _gateway(handler, api_key="test-key"):
    return AdvisoryGateway(
        api_key=api_key,
        model="gemini-test",
        api_base="https://example.test/v1beta",
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_prompt_mentions_trade_figures():
    prompt = build_prompt(**TRADE)
    assert "$18.0 MXN" in prompt
    assert "1000.0 USDT" in prompt
    assert "$500.00 MXN" in prompt
    assert "2.78%" in prompt


@pytest.mark.asyncio
async def test_returns_model_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": " Healthy spread. "}]}}]},
        )

    advice = await _gateway(handler).analyze_trade(**TRADE)

    assert advice == "Healthy spread."
    assert seen["url"] == "https://example.test/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert "Sell price: $18.5 MXN" in seen["body"]["contents"][0]["parts"][0]["text"]


@pytest.mark.asyncio
async def test_missing_key_skips_call():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    advice = await _gateway(handler, api_key="").analyze_trade(**TRADE)

    assert advice == FALLBACK_NO_KEY
    assert calls == []


@pytest.mark.asyncio
async def test_http_error_falls_back():
    advice = await _gateway(lambda request: httpx.Response(503)).analyze_trade(**TRADE)
    assert advice == FALLBACK_ERROR


@pytest.mark.asyncio
async def test_transport_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    advice = await _gateway(handler).analyze_trade(**TRADE)
    assert advice == FALLBACK_ERROR


@pytest.mark.asyncio
async def test_empty_answer_falls_back():
    advice = await _gateway(lambda request: httpx.Response(200, json={"candidates": []})).analyze_trade(**TRADE)
    assert advice == FALLBACK_EMPTY
