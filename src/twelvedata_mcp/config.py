"""Configuration helpers for the Twelve Data MCP server."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import TWELVEDATA_API_URL


load_dotenv()

_TRANSPORTS = ("stdio", "http")


@dataclass(frozen=True)
class Settings:
    api_key: str
    transport: str
    mcp_host: str
    port: int
    base_url: str
    log_level: str


def get_settings() -> Settings:
    """Load and return settings from environment variables."""
    api_key = os.getenv("TWELVEDATA_API_KEY")
    if not api_key:
        raise ValueError(
            "TWELVEDATA_API_KEY environment variable is required. "
            "Sign up for free at https://twelvedata.com/ to get your API key."
        )

    transport = (os.getenv("TRANSPORT") or "stdio").strip().lower()
    if transport not in _TRANSPORTS:
        raise ValueError(
            f"Unsupported TRANSPORT '{transport}'. Expected one of: {', '.join(_TRANSPORTS)}"
        )

    return Settings(
        api_key=api_key,
        transport=transport,
        mcp_host=os.getenv("MCP_HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        base_url=os.getenv("TWELVEDATA_API_URL", TWELVEDATA_API_URL).rstrip("/"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
