import asyncio

import httpx
import pytest

from autonews.client.ticker import MarketTicker
from autonews.core.config import Settings
from autonews.main import app
from autonews.services.markets import MarketService, get_market_service

FMP_PAYLOAD = [
    {"symbol": "SPY", "price": 510.2, "changesPercentage": 0.42},
    {"symbol": "NVDA", "price": 880.5, "changesPercentage": -1.3},
]
COINGECKO_PAYLOAD = {
    "bitcoin": {"usd": 60123.0, "usd_24h_change": 2.5},
    "ethereum": {"usd": 3100.0, "usd_24h_change": -0.75},
}


def _handler(stocks_ok=True, coins_ok=True, calls=None):
    def handler(request):
        if calls is not None:
            calls.append(request.url.host)
        if request.url.host == "financialmodelingprep.com":
            return httpx.Response(200, json=FMP_PAYLOAD) if stocks_ok else httpx.Response(429)
        if request.url.host == "api.coingecko.com":
            if not coins_ok:
                raise httpx.ConnectError("down", request=request)
            return httpx.Response(200, json=COINGECKO_PAYLOAD)
        return httpx.Response(404)
    return handler


def _service(**kwargs):
    calls = kwargs.pop("calls", None)
    return MarketService(settings=Settings(), transport=httpx.MockTransport(_handler(calls=calls, **kwargs)))


class TestMarketService:
    def test_stocks_then_coins(self):
        """测试行情数据合并"""
        quotes = asyncio.run(_service().quotes())
        assert [q.key for q in quotes] == ["SPY", "NVDA", "BTC", "ETH"]
        assert quotes[0].label == "S&P 500 (SPY)"
        assert quotes[2].price == 60123.0
        assert quotes[3].change_percent == -0.75

    def test_failed_source_is_skipped(self):
        """单个数据源失败不影响其他数据源"""
        quotes = asyncio.run(_service(stocks_ok=False).quotes())
        assert [q.key for q in quotes] == ["BTC", "ETH"]

        quotes = asyncio.run(_service(coins_ok=False).quotes())
        assert [q.key for q in quotes] == ["SPY", "NVDA"]

    def test_everything_down(self):
        assert asyncio.run(_service(stocks_ok=False, coins_ok=False).quotes()) == []

    def test_cached_between_calls(self):
        """测试缓存"""
        calls = []
        service = _service(calls=calls)

        async def scenario():
            await service.quotes()
            await service.quotes()
            await service.quotes(force=True)

        asyncio.run(scenario())
        assert len(calls) == 4


class TestMarketsEndpoint:
    @pytest.fixture
    def markets_client(self, client):
        app.dependency_overrides[get_market_service] = lambda: _service(stocks_ok=False)
        yield client

    def test_list_quotes(self, markets_client):
        response = markets_client.get("/api/markets")
        assert response.status_code == 200
        assert [q["key"] for q in response.json()] == ["BTC", "ETH"]


class TestMarketTicker:
    def test_rotates_through_quotes(self):
        """测试行情轮播"""
        def handler(request):
            return httpx.Response(200, json=[{"key": "SPY"}, {"key": "BTC"}])

        async def scenario():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://testserver") as http:
                ticker = MarketTicker(http)
                return [(await ticker.tick())["key"] for _ in range(3)]

        assert asyncio.run(scenario()) == ["SPY", "BTC", "SPY"]

    def test_unavailable(self):
        def handler(request):
            return httpx.Response(503)

        async def scenario():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://testserver") as http:
                return await MarketTicker(http).tick()

        assert asyncio.run(scenario()) is None
