"""Exceptions raised by the Productive.io client and configuration layer."""


class ProductiveError(Exception):
    """Base class for all productive_mcp errors."""


class ConfigurationError(ProductiveError):
    """Required configuration is missing or malformed."""


class ProductiveAPIError(ProductiveError):
    """Non-success response from the Productive.io API."""

    def __init__(self, status_code: int, detail: str, url: str = ""):
        self.status_code = status_code
        self.detail = detail
        self.url = url
        super().__init__(detail)
