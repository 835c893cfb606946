"""Rotating market ticker: shows one quote per tick."""
import logging
from typing import List, Optional

import httpx

from autonews.core.errors import StoreError

logger = logging.getLogger(__name__)


class MarketTicker:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.quotes: List[dict] = []
        self.index = 0

    async def load(self) -> List[dict]:
        try:
            response = await self.client.get("/api/markets")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Prices unavailable: %s", e)
            raise StoreError("Prices unavailable") from e
        self.quotes = response.json()
        return self.quotes

    async def tick(self) -> Optional[dict]:
        """Next quote in rotation, or None when no prices are available"""
        if not self.quotes:
            try:
                await self.load()
            except StoreError:
                return None
            if not self.quotes:
                return None
        quote = self.quotes[self.index % len(self.quotes)]
        self.index += 1
        return quote
