"""Tool table and dispatcher.

``build_registry`` creates the read-only name -> ``ToolSpec`` table once at
startup. ``Dispatcher.call`` runs one invocation through
validate -> invoke -> format -> envelope and never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional

import aiohttp
from mcp.types import CallToolResult, TextContent, Tool, ToolAnnotations
from pydantic import ValidationError

from .client import TwelveDataClient
from .constants import ResponseFormat
from .errors import TwelveDataError
from .formatters import (
    format_commodities,
    format_conversion,
    format_exchange_rate,
    format_forex_pairs,
    format_indicator,
    format_price,
    format_quote,
    format_time_series,
)
from .models import Payload
from .schemas import (
    ConvertCurrencyInput,
    GetExchangeRateInput,
    GetPriceInput,
    GetQuoteInput,
    GetTechnicalIndicatorInput,
    GetTimeSeriesInput,
    ListCommoditiesInput,
    ListForexPairsInput,
    ToolInput,
)
from .utils import dump_json, truncate_text

logger = logging.getLogger(__name__)

Handler = Callable[[TwelveDataClient, Any], Awaitable[Payload]]
Formatter = Callable[[Any, Any], str]

READ_ONLY_LIVE_DATA = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=True,
)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    title: str
    description: str
    schema: type[ToolInput]
    handler: Handler
    formatter: Formatter
    annotations: ToolAnnotations = field(default_factory=lambda: READ_ONLY_LIVE_DATA)

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.schema.model_json_schema(),
            annotations=self.annotations,
        )


# --- Handlers -----------------------------------------------------------------


async def _get_price(client: TwelveDataClient, params: GetPriceInput):
    return await client.get_price(params.symbol)


async def _get_quote(client: TwelveDataClient, params: GetQuoteInput):
    return await client.get_quote(params.symbol)


async def _get_time_series(client: TwelveDataClient, params: GetTimeSeriesInput):
    return await client.get_time_series(
        params.symbol,
        params.interval,
        outputsize=params.outputsize,
        start_date=params.start_date,
        end_date=params.end_date,
    )


async def _convert_currency(client: TwelveDataClient, params: ConvertCurrencyInput):
    return await client.convert_currency(params.symbol, params.amount)


async def _get_exchange_rate(client: TwelveDataClient, params: GetExchangeRateInput):
    return await client.get_exchange_rate(params.symbol)


async def _list_commodities(client: TwelveDataClient, params: ListCommoditiesInput):
    return await client.get_commodities()


async def _list_forex_pairs(client: TwelveDataClient, params: ListForexPairsInput):
    return await client.get_forex_pairs(params.currency_base, params.currency_quote)


async def _get_technical_indicator(client: TwelveDataClient, params: GetTechnicalIndicatorInput):
    return await client.get_technical_indicator(
        params.symbol,
        params.interval,
        params.indicator,
        outputsize=params.outputsize,
        time_period=params.time_period,
    )


# --- Tool table -----------------------------------------------------------------


def build_registry() -> Mapping[str, ToolSpec]:
    """Build a fresh, read-only table of every Twelve Data tool."""
    specs = [
        ToolSpec(
            name="twelvedata_get_price",
            title="Get Real-Time Price",
            description="""Get the current real-time price for any trading symbol.

Supports forex pairs, precious metals, crypto, and stocks. This is the fastest endpoint for getting current prices.

Symbols examples:
- Metals: XAU/USD (gold), XAG/USD (silver), XPT/USD (platinum)
- Forex: EUR/USD, GBP/USD, USD/JPY
- Crypto: BTC/USD, ETH/USD
- Stocks: AAPL, MSFT, GOOGL

Args:
  - symbol (string): Trading symbol (e.g., "XAU/USD", "EUR/USD", "BTC/USD")
  - response_format ('markdown' | 'json'): Output format

Returns:
  Current price of the symbol.

Examples:
  - "What's the current gold price?" -> symbol: "XAU/USD"
  - "Bitcoin price now" -> symbol: "BTC/USD\"""",
            schema=GetPriceInput,
            handler=_get_price,
            formatter=lambda params, price: format_price(price),
        ),
        ToolSpec(
            name="twelvedata_get_quote",
            title="Get Detailed Quote",
            description="""Get comprehensive quote data including OHLC, change, volume, and 52-week range.

More detailed than get_price: includes open, high, low, close, previous close, change percentage, and market status.

Args:
  - symbol (string): Trading symbol (e.g., "XAU/USD", "EUR/USD")
  - response_format ('markdown' | 'json'): Output format

Returns:
  Current price (close), open, high, low, previous close, change and percent change,
  volume and 52-week range when available, and whether the market is open.

Examples:
  - "Get full gold quote" -> symbol: "XAU/USD"
  - "EURUSD detailed info" -> symbol: "EUR/USD\"""",
            schema=GetQuoteInput,
            handler=_get_quote,
            formatter=lambda params, quote: format_quote(quote),
        ),
        ToolSpec(
            name="twelvedata_get_time_series",
            title="Get OHLC Time Series",
            description="""Get historical OHLC (Open, High, Low, Close) candlestick data.

Useful for chart analysis, backtesting, and historical price research. Supports timeframes from 1-minute to monthly data.

Args:
  - symbol (string): Trading symbol
  - interval (string): Candle interval - "1min", "5min", "15min", "30min", "45min", "1h", "2h", "4h", "8h", "1day", "1week", "1month"
  - outputsize (number): Number of candles to return (1-5000, default: 30)
  - start_date (string, optional): Start date YYYY-MM-DD
  - end_date (string, optional): End date YYYY-MM-DD
  - response_format ('markdown' | 'json'): Output format

Returns:
  Array of OHLC candles with datetime, open, high, low, close, and volume (where applicable).
  Markdown output shows at most 50 candles.

Examples:
  - "Get 1-hour gold candles" -> symbol: "XAU/USD", interval: "1h"
  - "Daily EURUSD last 100 days" -> symbol: "EUR/USD", interval: "1day", outputsize: 100""",
            schema=GetTimeSeriesInput,
            handler=_get_time_series,
            formatter=lambda params, series: format_time_series(series),
        ),
        ToolSpec(
            name="twelvedata_convert_currency",
            title="Convert Currency",
            description="""Convert an amount from one currency to another using real-time rates.

Supports fiat currencies, precious metals (XAU, XAG), and cryptocurrencies.

Args:
  - from (string): Source currency code (e.g., "USD", "EUR", "XAU", "BTC")
  - to (string): Target currency code
  - amount (number): Amount to convert
  - response_format ('markdown' | 'json'): Output format

Returns:
  Converted amount with exchange rate.

Examples:
  - "Convert 1000 USD to EUR" -> from: "USD", to: "EUR", amount: 1000
  - "How much is 1 oz gold in USD?" -> from: "XAU", to: "USD", amount: 1""",
            schema=ConvertCurrencyInput,
            handler=_convert_currency,
            formatter=lambda params, conversion: format_conversion(conversion, params.amount),
        ),
        ToolSpec(
            name="twelvedata_get_exchange_rate",
            title="Get Exchange Rate",
            description="""Get the current exchange rate for a currency pair.

Args:
  - symbol (string): Currency pair (e.g., "EUR/USD", "XAU/USD")
  - response_format ('markdown' | 'json'): Output format

Returns:
  Current exchange rate with timestamp.

Examples:
  - "EUR/USD exchange rate" -> symbol: "EUR/USD"
  - "Gold rate" -> symbol: "XAU/USD\"""",
            schema=GetExchangeRateInput,
            handler=_get_exchange_rate,
            formatter=lambda params, rate: format_exchange_rate(rate),
        ),
        ToolSpec(
            name="twelvedata_list_commodities",
            title="List Available Commodities",
            description="""Get a list of all available commodities including precious metals, energy, and agricultural products.

Args:
  - response_format ('markdown' | 'json'): Output format

Returns:
  List of commodities with symbols, names, and categories.

Examples:
  - "What metals can I trade?" -> lists all available commodities""",
            schema=ListCommoditiesInput,
            handler=_list_commodities,
            formatter=lambda params, commodities: format_commodities(commodities),
        ),
        ToolSpec(
            name="twelvedata_list_forex_pairs",
            title="List Forex Pairs",
            description="""List available forex pairs, optionally filtered by base or quote currency.

Args:
  - currency_base (string, optional): Base currency filter (e.g., "USD", "EUR")
  - currency_quote (string, optional): Quote currency filter (e.g., "JPY")
  - response_format ('markdown' | 'json'): Output format

Returns:
  Forex pairs with symbol, base and quote currency and currency group.
  Markdown output shows at most 100 pairs.

Examples:
  - "Which pairs trade against the yen?" -> currency_quote: "JPY\"""",
            schema=ListForexPairsInput,
            handler=_list_forex_pairs,
            formatter=lambda params, pairs: format_forex_pairs(pairs),
        ),
        ToolSpec(
            name="twelvedata_technical_indicator",
            title="Get Technical Indicator",
            description="""Calculate technical indicators for a symbol.

Available indicators:
- Trend: SMA, EMA, WMA, ADX
- Momentum: RSI, MACD, MOM, ROC, STOCH, WILLR, CCI
- Volatility: BBANDS (Bollinger Bands), ATR
- Volume: OBV

Args:
  - symbol (string): Trading symbol
  - interval (string): Time interval for calculation
  - indicator (string): Indicator type (sma, ema, rsi, macd, bbands, stoch, adx, atr, ...)
  - time_period (number): Period for calculation (1-200, default: 14)
  - outputsize (number): Number of data points (1-500, default: 30)
  - response_format ('markdown' | 'json'): Output format

Returns:
  Indicator values with timestamps. Markdown output shows at most 30 rows.

Examples:
  - "RSI for gold" -> symbol: "XAU/USD", indicator: "rsi"
  - "20-period SMA for BTC" -> symbol: "BTC/USD", indicator: "sma", time_period: 20""",
            schema=GetTechnicalIndicatorInput,
            handler=_get_technical_indicator,
            formatter=lambda params, indicator: format_indicator(indicator, params.indicator),
        ),
    ]
    return MappingProxyType({spec.name: spec for spec in specs})


# --- Dispatcher -----------------------------------------------------------------


def error_result(message: str) -> CallToolResult:
    return CallToolResult(
        isError=True,
        content=[TextContent(type="text", text=f"Error: {message}")],
    )


def describe_validation_error(exc: ValidationError) -> str:
    """Render pydantic errors as ``field: message`` pairs."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        parts.append(f"{field}: {error['msg']}")
    return "; ".join(parts)


class Dispatcher:
    """Runs tool invocations against a Twelve Data client."""

    def __init__(self, client: TwelveDataClient, registry: Optional[Mapping[str, ToolSpec]] = None):
        self.client = client
        self.registry = registry if registry is not None else build_registry()

    def list_tools(self) -> list[Tool]:
        return [spec.to_tool() for spec in self.registry.values()]

    async def call(self, name: str, arguments: Optional[dict[str, Any]]) -> CallToolResult:
        spec = self.registry.get(name)
        if spec is None:
            return error_result(f"Unknown tool: {name}")

        try:
            params = spec.schema.model_validate(arguments or {})
        except ValidationError as exc:
            logger.info(f"Rejected {name} call: {exc.error_count()} invalid argument(s)")
            return error_result(f"Invalid arguments for {name}: {describe_validation_error(exc)}")

        logger.info(f"Calling {name}")
        try:
            payload = await spec.handler(self.client, params)
            if params.response_format == ResponseFormat.JSON:
                data = payload.to_dict()
                return CallToolResult(
                    content=[TextContent(type="text", text=dump_json(data))],
                    structuredContent=data,
                )
            text = truncate_text(spec.formatter(params, payload))
            return CallToolResult(content=[TextContent(type="text", text=text)])
        except TwelveDataError as exc:
            logger.warning(f"{name} failed: {exc}")
            return error_result(str(exc))
        except ValidationError as exc:
            logger.warning(f"{name} received an unexpected payload: {exc}")
            return error_result(f"Unexpected response from Twelve Data: {describe_validation_error(exc)}")
        except aiohttp.ClientError as exc:
            logger.warning(f"{name} network error: {exc}")
            return error_result(f"Network error while calling Twelve Data: {exc}")
        except Exception as exc:
            logger.exception(f"Unexpected error in {name}")
            return error_result(str(exc) or type(exc).__name__)
