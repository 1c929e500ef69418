"""Typed views of the Twelve Data response payloads.

Upstream returns most numbers as strings, so numeric fields accept either
form. Unknown fields are kept so that JSON responses pass through untouched.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Numeric = Union[str, int, float]


class Payload(BaseModel):
    model_config = ConfigDict(extra="allow")

    def to_dict(self) -> dict[str, Any]:
        """Return the payload as plain JSON data, without fields upstream never sent."""
        return self.model_dump(mode="json", exclude_unset=True)


class Price(Payload):
    symbol: str
    price: Numeric


class FiftyTwoWeek(Payload):
    low: Optional[Numeric] = None
    high: Optional[Numeric] = None
    low_change: Optional[Numeric] = None
    high_change: Optional[Numeric] = None
    low_change_percent: Optional[Numeric] = None
    high_change_percent: Optional[Numeric] = None
    range: Optional[str] = None


class Quote(Payload):
    symbol: str
    name: Optional[str] = None
    exchange: Optional[str] = None
    mic_code: Optional[str] = None
    currency: Optional[str] = None
    datetime: Optional[str] = None
    timestamp: Optional[int] = None
    open: Optional[Numeric] = None
    high: Optional[Numeric] = None
    low: Optional[Numeric] = None
    close: Numeric
    volume: Optional[Numeric] = None
    previous_close: Optional[Numeric] = None
    change: Numeric
    percent_change: Optional[Numeric] = None
    average_volume: Optional[Numeric] = None
    is_market_open: Optional[bool] = None
    fifty_two_week: Optional[FiftyTwoWeek] = None


class SeriesMeta(Payload):
    symbol: str
    interval: str
    currency: Optional[str] = None
    exchange_timezone: Optional[str] = None
    exchange: Optional[str] = None
    mic_code: Optional[str] = None
    type: Optional[str] = None


class Candle(Payload):
    datetime: str
    open: Numeric
    high: Numeric
    low: Numeric
    close: Numeric
    volume: Optional[Numeric] = None


class TimeSeries(Payload):
    meta: SeriesMeta
    values: list[Candle] = Field(default_factory=list)
    status: Optional[str] = None


class ExchangeRate(Payload):
    symbol: str
    rate: float
    timestamp: int


class CurrencyConversion(Payload):
    symbol: str
    rate: float
    amount: float
    timestamp: int


class Commodity(Payload):
    symbol: str
    name: str
    category: str
    description: Optional[str] = None


class Commodities(Payload):
    data: list[Commodity] = Field(default_factory=list)
    status: Optional[str] = None


class ForexPair(Payload):
    symbol: str
    currency_group: Optional[str] = None
    currency_base: Optional[str] = None
    currency_quote: Optional[str] = None


class ForexPairs(Payload):
    data: list[ForexPair] = Field(default_factory=list)
    status: Optional[str] = None


class TechnicalIndicator(Payload):
    meta: SeriesMeta
    values: list[dict[str, Any]] = Field(default_factory=list)
    status: Optional[str] = None
