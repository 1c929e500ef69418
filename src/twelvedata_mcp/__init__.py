"""MCP server exposing Twelve Data market data tools."""

__version__ = "1.0.0"
