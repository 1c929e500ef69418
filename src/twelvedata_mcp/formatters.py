"""Markdown renderers for Twelve Data payloads.

All functions are pure: the same payload always renders to the same text.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from .constants import FOREX_PAIRS_DISPLAY_ROWS, INDICATOR_DISPLAY_ROWS, TIME_SERIES_DISPLAY_ROWS
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


def _fixed(value: Any, digits: int = 5) -> str:
    return f"{float(value):.{digits}f}"


def _grouped_int(value: Any) -> str:
    return f"{int(float(value)):,}"


def _text(value: Any) -> str:
    return "N/A" if value is None else str(value)


def format_amount(value: float, min_digits: int, max_digits: int) -> str:
    """Format with thousands separators and between min and max fraction digits."""
    text = f"{value:,.{max_digits}f}"
    if max_digits > min_digits:
        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0").ljust(min_digits, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    return text


def iso_timestamp(seconds: int) -> str:
    """Unix epoch seconds to an ISO-8601 UTC instant, e.g. 2023-11-14T22:13:20.000Z."""
    instant = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _truncation_notice(shown: int, total: int) -> list[str]:
    return ["", f"*...showing {shown} of {total} records*"]


def format_price(price: Price) -> str:
    return f"**{price.symbol}**: {_fixed(price.price)}"


def format_quote(quote: Quote) -> str:
    rising = float(quote.change) >= 0
    marker = "📈" if rising else "📉"
    sign = "+" if rising else ""
    price = " ".join(part for part in (_fixed(quote.close), quote.currency) if part)

    lines = [
        f"## {quote.symbol} - {quote.name or 'Quote'}",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| **Price** | {price} |",
        f"| **Change** | {marker} {sign}{quote.change} ({sign}{_text(quote.percent_change)}%) |",
        f"| **Open** | {_text(quote.open)} |",
        f"| **High** | {_text(quote.high)} |",
        f"| **Low** | {_text(quote.low)} |",
        f"| **Previous Close** | {_text(quote.previous_close)} |",
        f"| **Exchange** | {_text(quote.exchange)} |",
        f"| **Timestamp** | {_text(quote.datetime)} |",
        f"| **Market Open** | {'Yes ✅' if quote.is_market_open else 'No ❌'} |",
    ]

    if quote.volume not in (None, ""):
        lines.append(f"| **Volume** | {_grouped_int(quote.volume)} |")

    if quote.fifty_two_week is not None and quote.fifty_two_week.range:
        lines.append(f"| **52-Week Range** | {quote.fifty_two_week.range} |")

    return "\n".join(lines)


def format_time_series(series: TimeSeries) -> str:
    meta = series.meta
    has_volume = bool(series.values) and series.values[0].volume is not None

    lines = [
        f"## {meta.symbol} Time Series",
        "",
        f"**Interval:** {meta.interval}",
        f"**Exchange:** {_text(meta.exchange)}",
        f"**Timezone:** {_text(meta.exchange_timezone)}",
        "",
        "| Datetime | Open | High | Low | Close |" + (" Volume |" if has_volume else ""),
        "|----------|------|------|-----|-------|" + ("--------|" if has_volume else ""),
    ]

    for candle in series.values[:TIME_SERIES_DISPLAY_ROWS]:
        row = (
            f"| {candle.datetime} | {_fixed(candle.open)} | {_fixed(candle.high)} "
            f"| {_fixed(candle.low)} | {_fixed(candle.close)} |"
        )
        if candle.volume is not None:
            row += f" {_grouped_int(candle.volume)} |"
        lines.append(row)

    if len(series.values) > TIME_SERIES_DISPLAY_ROWS:
        lines.extend(_truncation_notice(TIME_SERIES_DISPLAY_ROWS, len(series.values)))

    return "\n".join(lines)


def format_conversion(conversion: CurrencyConversion, amount: float) -> str:
    base, _, quote = conversion.symbol.partition("/")
    return "\n".join(
        [
            "## Currency Conversion",
            "",
            f"**{format_amount(amount, 0, 3)} {base}** = "
            f"**{format_amount(conversion.amount, 2, 6)} {quote}**",
            "",
            f"- Exchange Rate: 1 {base} = {conversion.rate:.6f} {quote}",
            f"- Timestamp: {iso_timestamp(conversion.timestamp)}",
        ]
    )


def format_exchange_rate(rate: ExchangeRate) -> str:
    return "\n".join(
        [
            f"## Exchange Rate: {rate.symbol}",
            "",
            f"**Rate:** {rate.rate:.6f}",
            f"**Timestamp:** {iso_timestamp(rate.timestamp)}",
        ]
    )


def format_commodities(commodities: Commodities) -> str:
    lines = [
        "## Available Commodities",
        "",
        "| Symbol | Name | Category |",
        "|--------|------|----------|",
    ]

    by_category: dict[str, list] = {}
    for item in commodities.data:
        by_category.setdefault(item.category, []).append(item)

    for category in sorted(by_category):
        for item in by_category[category]:
            lines.append(f"| {item.symbol} | {item.name} | {category} |")

    return "\n".join(lines)


def format_forex_pairs(pairs: ForexPairs) -> str:
    lines = [
        "## Available Forex Pairs",
        "",
        "| Symbol | Base | Quote | Group |",
        "|--------|------|-------|-------|",
    ]
    for pair in pairs.data[:FOREX_PAIRS_DISPLAY_ROWS]:
        lines.append(
            f"| {pair.symbol} | {_text(pair.currency_base)} | {_text(pair.currency_quote)} "
            f"| {_text(pair.currency_group)} |"
        )

    if len(pairs.data) > FOREX_PAIRS_DISPLAY_ROWS:
        lines.extend(_truncation_notice(FOREX_PAIRS_DISPLAY_ROWS, len(pairs.data)))

    return "\n".join(lines)


def _indicator_cell(column: str, value: Any) -> str:
    if value is None:
        return ""
    if column == "datetime":
        return str(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    # "nan"/"inf" parse as floats but are not numbers worth rounding
    if not math.isfinite(number):
        return str(value)
    return f"{number:.5f}"


def format_indicator(indicator: TechnicalIndicator, name: str) -> str:
    lines = [
        f"## {name.upper()} - {indicator.meta.symbol}",
        "",
        f"**Interval:** {indicator.meta.interval}",
        "",
    ]

    if not indicator.values:
        lines.append("No data available.")
        return "\n".join(lines)

    columns = list(indicator.values[0].keys())
    lines.append(f"| {' | '.join(columns)} |")
    lines.append(f"|{'|'.join('------' for _ in columns)}|")

    for row in indicator.values[:INDICATOR_DISPLAY_ROWS]:
        cells = [_indicator_cell(column, row.get(column)) for column in columns]
        lines.append(f"| {' | '.join(cells)} |")

    if len(indicator.values) > INDICATOR_DISPLAY_ROWS:
        lines.extend(_truncation_notice(INDICATOR_DISPLAY_ROWS, len(indicator.values)))

    return "\n".join(lines)
