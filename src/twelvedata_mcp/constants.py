"""Twelve Data API constants shared across the server.

Free tier: 8 API credits/minute, 800/day. Sign up at https://twelvedata.com/
"""

from enum import Enum
from typing import Literal

TWELVEDATA_API_URL = "https://api.twelvedata.com"

SERVER_NAME = "twelvedata-mcp-server"

# Markdown responses longer than this are truncated
CHARACTER_LIMIT = 50000

TIME_SERIES_DISPLAY_ROWS = 50
INDICATOR_DISPLAY_ROWS = 30
FOREX_PAIRS_DISPLAY_ROWS = 100


class ResponseFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"


Interval = Literal[
    "1min", "5min", "15min", "30min", "45min",
    "1h", "2h", "4h", "8h",
    "1day", "1week", "1month",
]

Indicator = Literal[
    "sma", "ema", "wma", "rsi", "macd", "bbands", "stoch",
    "adx", "atr", "cci", "obv", "mom", "roc", "willr",
]
