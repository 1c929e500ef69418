"""Input models for every Twelve Data tool.

Each model rejects unknown fields and is also the source of the JSON schema
advertised to MCP clients.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import Indicator, Interval

ResponseFormatField = Annotated[
    Literal["markdown", "json"],
    Field(description="Output format: 'markdown' for human-readable or 'json' for structured data"),
]

DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"

Date = Annotated[str, Field(pattern=DATE_PATTERN)]
CurrencyFilter = Annotated[str, Field(min_length=1, max_length=10)]


def _symbol(description: str):
    return Field(min_length=1, max_length=20, description=description)


class ToolInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class GetPriceInput(ToolInput):
    symbol: Annotated[str, _symbol("Symbol to get price for (e.g., XAU/USD for gold, EUR/USD for forex)")]
    response_format: ResponseFormatField = "markdown"


class GetQuoteInput(ToolInput):
    symbol: Annotated[str, _symbol("Symbol to get detailed quote for (includes OHLC, change, volume)")]
    response_format: ResponseFormatField = "markdown"


class GetTimeSeriesInput(ToolInput):
    symbol: Annotated[str, _symbol("Symbol for time series data")]
    interval: Annotated[
        Interval,
        Field(description="Candle interval (1min, 5min, 15min, 30min, 1h, 4h, 1day, 1week)"),
    ] = "1day"
    outputsize: Annotated[
        int,
        Field(strict=True, ge=1, le=5000, description="Number of data points to return (1-5000, default: 30)"),
    ] = 30
    start_date: Annotated[
        Optional[Date],
        Field(description="Start date for historical data (YYYY-MM-DD)"),
    ] = None
    end_date: Annotated[
        Optional[Date],
        Field(description="End date for historical data (YYYY-MM-DD)"),
    ] = None
    response_format: ResponseFormatField = "markdown"


class ConvertCurrencyInput(ToolInput):
    from_currency: Annotated[
        str,
        Field(alias="from", min_length=3, max_length=5, description="Source currency code (e.g., USD, EUR, XAU)"),
    ]
    to_currency: Annotated[
        str,
        Field(alias="to", min_length=3, max_length=5, description="Target currency code (e.g., EUR, JPY, USD)"),
    ]
    amount: Annotated[float, Field(strict=True, gt=0, description="Amount to convert")]
    response_format: ResponseFormatField = "markdown"

    @property
    def symbol(self) -> str:
        return f"{self.from_currency}/{self.to_currency}"


class GetExchangeRateInput(ToolInput):
    symbol: Annotated[str, _symbol("Currency pair for exchange rate (e.g., EUR/USD, XAU/USD)")]
    response_format: ResponseFormatField = "markdown"


class ListCommoditiesInput(ToolInput):
    response_format: ResponseFormatField = "markdown"


class ListForexPairsInput(ToolInput):
    currency_base: Annotated[
        Optional[CurrencyFilter],
        Field(description="Filter by base currency (e.g., USD, EUR)"),
    ] = None
    currency_quote: Annotated[
        Optional[CurrencyFilter],
        Field(description="Filter by quote currency (e.g., USD, JPY)"),
    ] = None
    response_format: ResponseFormatField = "markdown"


class GetTechnicalIndicatorInput(ToolInput):
    symbol: Annotated[str, _symbol("Symbol for technical analysis")]
    interval: Annotated[Interval, Field(description="Time interval for indicator calculation")] = "1day"
    indicator: Annotated[Indicator, Field(description="Technical indicator type")]
    time_period: Annotated[
        int,
        Field(strict=True, ge=1, le=200, description="Time period for indicator (default: 14)"),
    ] = 14
    outputsize: Annotated[
        int,
        Field(strict=True, ge=1, le=500, description="Number of data points to return"),
    ] = 30
    response_format: ResponseFormatField = "markdown"
