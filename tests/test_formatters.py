"""Tests for the markdown renderers."""

from twelvedata_mcp.formatters import (
    format_amount,
    format_commodities,
    format_conversion,
    format_exchange_rate,
    format_forex_pairs,
    format_indicator,
    format_price,
    format_quote,
    format_time_series,
    iso_timestamp,
)
from twelvedata_mcp.models import (
    Commodities,
    CurrencyConversion,
    ExchangeRate,
    ForexPairs,
    Price,
    Quote,
    TechnicalIndicator,
    TimeSeries,
)

from tests.payloads import (
    commodities_payload,
    forex_pairs_payload,
    indicator_payload,
    quote_payload,
    time_series_payload,
)


def _table_rows(text):
    """Data rows of the first markdown table (header and separator excluded)."""
    rows = [line for line in text.splitlines() if line.startswith("|")]
    return rows[2:]


def test_price_rounds_to_five_digits():
    assert format_price(Price(symbol="EUR/USD", price="1.0876543")) == "**EUR/USD**: 1.08765"


def test_quote_rising_with_optional_rows():
    quote = Quote.model_validate(
        quote_payload(volume="1234567", fifty_two_week={"low": "1810.00", "high": "2135.40", "range": "1810.00 - 2135.40"})
    )

    text = format_quote(quote)

    assert text.startswith("## XAU/USD - Gold Spot / US Dollar")
    assert "| **Price** | 2064.01000 USD |" in text
    assert "📈 +1.03 (+0.05%)" in text
    assert "| **Volume** | 1,234,567 |" in text
    assert "| **52-Week Range** | 1810.00 - 2135.40 |" in text
    assert "Yes ✅" in text


def test_quote_falling_without_optional_rows():
    quote = Quote.model_validate(quote_payload(change="-2.5", percent_change="-0.12", is_market_open=False))

    text = format_quote(quote)

    assert "📉 -2.5 (-0.12%)" in text
    assert "Volume" not in text
    assert "52-Week" not in text
    assert "No ❌" in text


def test_time_series_truncates_to_fifty_rows():
    series = TimeSeries.model_validate(time_series_payload(75))

    text = format_time_series(series)

    assert len(_table_rows(text)) == 50
    assert "showing 50 of 75" in text


def test_time_series_short_series_has_no_notice():
    series = TimeSeries.model_validate(time_series_payload(10))

    text = format_time_series(series)

    assert len(_table_rows(text)) == 10
    assert "showing" not in text


def test_time_series_keeps_upstream_order_and_volume_column():
    series = TimeSeries.model_validate(time_series_payload(3))

    rows = _table_rows(format_time_series(series))

    assert "| Volume |" in format_time_series(series)
    assert rows[0].startswith("| 2024-01-01 00:00:00 | 100.10000 |")
    assert rows[0].endswith("1,000 |")
    assert rows[2].startswith("| 2024-01-03 02:00:00 | 102.10000 |")


def test_time_series_without_volume():
    series = TimeSeries.model_validate(time_series_payload(2, volume=False))

    text = format_time_series(series)

    assert "Volume" not in text
    assert _table_rows(text)[0].count("|") == 6


def test_conversion_figures():
    conversion = CurrencyConversion(symbol="USD/EUR", rate=0.92, amount=920.0, timestamp=1700000000)

    text = format_conversion(conversion, 1000)

    assert "**1,000 USD** = **920.00 EUR**" in text
    assert "1 USD = 0.920000 EUR" in text
    assert "2023-11-14T22:13:20.000Z" in text


def test_format_amount_fraction_digit_bounds():
    assert format_amount(920.0, 2, 6) == "920.00"
    assert format_amount(1234.5678912, 2, 6) == "1,234.567891"
    assert format_amount(0.5, 0, 3) == "0.5"
    assert format_amount(1000, 0, 3) == "1,000"


def test_iso_timestamp_is_utc():
    assert iso_timestamp(0) == "1970-01-01T00:00:00.000Z"


def test_exchange_rate():
    text = format_exchange_rate(ExchangeRate(symbol="EUR/USD", rate=1.0876, timestamp=1700000000))

    assert "## Exchange Rate: EUR/USD" in text
    assert "**Rate:** 1.087600" in text
    assert "**Timestamp:** 2023-11-14T22:13:20.000Z" in text


def test_commodities_grouped_by_sorted_category():
    rows = _table_rows(format_commodities(Commodities.model_validate(commodities_payload())))

    assert rows == [
        "| C_1 | Corn | Agricultural Product |",
        "| WTI/USD | Crude Oil WTI | Energy |",
        "| XAU/USD | Gold Spot | Precious Metal |",
        "| XAG/USD | Silver Spot | Precious Metal |",
    ]


def test_forex_pairs_truncates_long_listing():
    text = format_forex_pairs(ForexPairs.model_validate(forex_pairs_payload(120)))

    assert len(_table_rows(text)) == 100
    assert "showing 100 of 120" in text


def test_indicator_formats_numeric_cells():
    text = format_indicator(TechnicalIndicator.model_validate(indicator_payload(2)), "rsi")

    assert text.startswith("## RSI - EUR/USD")
    assert "| datetime | rsi |" in text
    assert "| 2024-02-01 | 40.00000 |" in text
    assert "| 2024-02-02 | 40.12346 |" in text


def test_indicator_passes_non_numeric_cells_through():
    payload = indicator_payload(1)
    payload["values"][0]["signal"] = "n/a"

    text = format_indicator(TechnicalIndicator.model_validate(payload), "macd")

    assert "| 2024-02-01 | 40.00000 | n/a |" in text


def test_indicator_truncates_to_thirty_rows():
    text = format_indicator(TechnicalIndicator.model_validate(indicator_payload(45)), "rsi")

    assert len(_table_rows(text)) == 30
    assert "showing 30 of 45" in text


def test_indicator_without_rows():
    text = format_indicator(TechnicalIndicator.model_validate(indicator_payload(0)), "sma")

    assert "No data available." in text
    assert "|" not in text


def test_formatting_is_idempotent():
    series = TimeSeries.model_validate(time_series_payload(75))
    conversion = CurrencyConversion(symbol="USD/EUR", rate=0.92, amount=920.0, timestamp=1700000000)

    assert format_time_series(series) == format_time_series(series)
    assert format_conversion(conversion, 1000) == format_conversion(conversion, 1000)
    assert len(series.values) == 75
