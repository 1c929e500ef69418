"""Exceptions raised while talking to the Twelve Data API."""


class TwelveDataError(Exception):
    """Base class for every failure surfaced by the upstream client."""


class ConfigurationError(TwelveDataError):
    """Raised when the client is missing its API key."""


class TwelveDataHTTPError(TwelveDataError):
    """Non-2xx response from the upstream API."""

    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        super().__init__(f"Twelve Data API HTTP error: {status} {reason}".rstrip())


class TwelveDataAPIError(TwelveDataError):
    """Error payload (``status == "error"``) inside a 2xx response."""

    def __init__(self, code: int | None, message: str):
        self.code = code
        self.message = message
        super().__init__(f"Twelve Data API error: {message} (code: {code})")
