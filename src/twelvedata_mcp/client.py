"""Async client for the Twelve Data REST API."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import aiohttp

from .constants import TWELVEDATA_API_URL
from .errors import ConfigurationError, TwelveDataAPIError, TwelveDataHTTPError
from .models import (
    Commodities,
    CurrencyConversion,
    ExchangeRate,
    ForexPairs,
    Price,
    Quote,
    TechnicalIndicator,
    TimeSeries,
)

logger = logging.getLogger(__name__)


class TwelveDataClient:
    """Thin wrapper around the Twelve Data endpoints used by the MCP tools.

    Every call performs exactly one GET request. Nothing is cached and
    failures are never retried.
    """

    def __init__(self, api_key: str, base_url: str = TWELVEDATA_API_URL):
        """Initialize client.

        Args:
            api_key: Twelve Data API key, sent as the ``apikey`` query parameter
            base_url: Root URL of the API (no trailing slash)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def _request(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Perform a GET request and return the decoded JSON body.

        Parameters whose value is ``None`` are left out of the query string.

        Raises:
            ConfigurationError: If no API key is configured (raised before any I/O)
            TwelveDataHTTPError: If the response status is not 2xx
            TwelveDataAPIError: If the body carries ``"status": "error"``
        """
        if not self.api_key:
            raise ConfigurationError(
                "TWELVEDATA_API_KEY environment variable is required. "
                "Sign up for free at https://twelvedata.com/ to get your API key."
            )

        query = {"apikey": self.api_key}
        for key, value in (params or {}).items():
            if value is not None:
                query[key] = str(value)

        url = f"{self.base_url}{endpoint}"
        visible = {k: v for k, v in query.items() if k != "apikey"}
        logger.debug(f"GET {endpoint} params={visible}")

        async with aiohttp.ClientSession() as session:
            async with session.get(url, params=query) as response:
                if not 200 <= response.status < 300:
                    logger.warning(f"Twelve Data {endpoint} returned HTTP {response.status}")
                    raise TwelveDataHTTPError(response.status, response.reason or "")
                data = await response.json(content_type=None)

        if isinstance(data, dict) and data.get("status") == "error":
            logger.warning(f"Twelve Data {endpoint} returned error payload: {data.get('message')}")
            raise TwelveDataAPIError(data.get("code"), data.get("message", "Unknown error"))

        return data

    async def get_price(self, symbol: str) -> Price:
        """Get real-time price for a symbol."""
        data = await self._request("/price", {"symbol": symbol})
        return Price.model_validate({"symbol": symbol, **data})

    async def get_quote(self, symbol: str) -> Quote:
        """Get detailed quote for a symbol."""
        return Quote.model_validate(await self._request("/quote", {"symbol": symbol}))

    async def get_time_series(
        self,
        symbol: str,
        interval: str,
        outputsize: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> TimeSeries:
        """Get OHLC candles, newest first as returned by the API."""
        data = await self._request(
            "/time_series",
            {
                "symbol": symbol,
                "interval": interval,
                "outputsize": outputsize,
                "start_date": start_date,
                "end_date": end_date,
            },
        )
        return TimeSeries.model_validate(data)

    async def get_exchange_rate(self, symbol: str) -> ExchangeRate:
        return ExchangeRate.model_validate(await self._request("/exchange_rate", {"symbol": symbol}))

    async def convert_currency(self, symbol: str, amount: float) -> CurrencyConversion:
        data = await self._request("/currency_conversion", {"symbol": symbol, "amount": amount})
        return CurrencyConversion.model_validate(data)

    async def get_commodities(self) -> Commodities:
        """List commodities (precious metals, energy, agricultural, ...)."""
        return Commodities.model_validate(await self._request("/commodities"))

    async def get_forex_pairs(
        self,
        currency_base: Optional[str] = None,
        currency_quote: Optional[str] = None,
    ) -> ForexPairs:
        data = await self._request(
            "/forex_pairs",
            {"currency_base": currency_base, "currency_quote": currency_quote},
        )
        return ForexPairs.model_validate(data)

    async def get_technical_indicator(
        self,
        symbol: str,
        interval: str,
        indicator: str,
        outputsize: Optional[int] = None,
        **extra: Any,
    ) -> TechnicalIndicator:
        """Get indicator values; ``extra`` holds indicator-specific parameters such as ``time_period``."""
        data = await self._request(
            f"/{indicator}",
            {"symbol": symbol, "interval": interval, "outputsize": outputsize, **extra},
        )
        return TechnicalIndicator.model_validate(data)
