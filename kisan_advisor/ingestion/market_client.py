"""
Mandi price client — demo quotes only.

There is no free, keyless mandi price API suitable for direct client calls;
production data would come from a government portal (e.g. Agmarknet)
behind a server-side proxy.  Until one is wired in, ``fetch()`` returns the
same fixture quotes as ``get_fixture_prices()``.

Prices are in INR per ``unit`` ("kg" or "quintal").
"""

from __future__ import annotations

import logging
from typing import ClassVar, Optional

import httpx

from kisan_advisor.models.readings import MarketPrice

logger = logging.getLogger(__name__)


class MarketClient:
    """Demo market price feed.

    Usage::

        prices = MarketClient().get_fixture_prices()
    """

    SOURCE: ClassVar[str] = "demo"

    FIXTURE_PRICES: ClassVar[list[dict]] = [
        {"crop_name": "Wheat",  "unit": "quintal", "price": 2275.0, "market_name": "Delhi Mandi"},
        {"crop_name": "Rice",   "unit": "quintal", "price": 2400.0, "market_name": "Lucknow Mandi"},
        {"crop_name": "Tomato", "unit": "kg",      "price": 22.0,   "market_name": "Pune Market"},
        {"crop_name": "Onion",  "unit": "kg",      "price": 28.0,   "market_name": "Nashik"},
    ]

    async def fetch(self, client: Optional[httpx.AsyncClient] = None) -> list[MarketPrice]:
        """Return current quotes.  Always the demo list for now."""
        prices = self.get_fixture_prices()
        logger.debug("MarketClient: returning %d demo quotes", len(prices))
        return prices

    def get_fixture_prices(self) -> list[MarketPrice]:
        return [MarketPrice(**p) for p in self.FIXTURE_PRICES]
