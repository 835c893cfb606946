"""Market snapshot for the ticker: a few stock quotes and coin prices.

Each source is fetched independently; a failing source contributes nothing
instead of failing the whole snapshot.
"""
import asyncio
import logging
import time
from functools import lru_cache
from typing import List, Optional

import httpx

from autonews.core.config import Settings, get_settings
from autonews.schemas.market import Quote

logger = logging.getLogger(__name__)

FMP_QUOTE_URL = "https://financialmodelingprep.com/api/v3/quote/{symbols}"
COINGECKO_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"

STOCK_LABELS = {
    "SPY": "S&P 500 (SPY)",
    "DIA": "Dow (DIA)",
    "NVDA": "NVIDIA (NVDA)",
}
COIN_KEYS = {
    "bitcoin": ("BTC", "Bitcoin"),
    "ethereum": ("ETH", "Ethereum"),
    "solana": ("SOL", "Solana"),
}


class MarketService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.settings = settings or get_settings()
        self.transport = transport
        self.timeout = timeout
        self._cached: List[Quote] = []
        self._cached_at: float = 0.0

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            timeout=self.timeout,
            headers={"Cache-Control": "no-store"},
        )

    async def fetch_stocks(self, client: httpx.AsyncClient) -> List[Quote]:
        symbols = self.settings.market_stock_symbols
        if not symbols:
            return []
        try:
            response = await client.get(
                FMP_QUOTE_URL.format(symbols=",".join(symbols)),
                params={"apikey": self.settings.fmp_api_key},
            )
            response.raise_for_status()
            return [
                Quote(
                    key=item["symbol"],
                    label=STOCK_LABELS.get(item["symbol"], item.get("name") or item["symbol"]),
                    price=item["price"],
                    change_percent=item.get("changesPercentage") or 0.0,
                )
                for item in response.json()
            ]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning("Stocks unavailable: %s", e)
            return []

    async def fetch_coins(self, client: httpx.AsyncClient) -> List[Quote]:
        coin_ids = self.settings.market_coin_ids
        if not coin_ids:
            return []
        try:
            response = await client.get(
                COINGECKO_PRICE_URL,
                params={
                    "ids": ",".join(coin_ids),
                    "vs_currencies": "usd",
                    "include_24hr_change": "true",
                },
            )
            response.raise_for_status()
            data = response.json()
            quotes = []
            for coin_id in coin_ids:
                if coin_id not in data:
                    continue
                key, label = COIN_KEYS.get(coin_id, (coin_id.upper(), coin_id.title()))
                quotes.append(Quote(
                    key=key,
                    label=label,
                    price=data[coin_id]["usd"],
                    change_percent=data[coin_id].get("usd_24h_change") or 0.0,
                ))
            return quotes
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning("Coins unavailable: %s", e)
            return []

    async def quotes(self, force: bool = False) -> List[Quote]:
        """Stocks then coins, cached for MARKET_CACHE_SECONDS"""
        now = time.monotonic()
        if not force and self._cached and now - self._cached_at < self.settings.market_cache_seconds:
            return self._cached

        async with self._client() as client:
            stocks, coins = await asyncio.gather(self.fetch_stocks(client), self.fetch_coins(client))
        quotes = stocks + coins
        # empty snapshots are never cached
        if quotes:
            self._cached = quotes
            self._cached_at = now
        return quotes


@lru_cache()
def get_market_service() -> MarketService:
    return MarketService()
