"""
Error taxonomy for the import pipeline.

Each error is isolated at the smallest unit it affects (one URL, one
product, one sub-step); only ConfigurationError aborts a whole request.
"""

from typing import Any, Dict, List, Optional, Sequence


class ImporterError(Exception):
    """Base class for all pipeline errors."""


class ScrapeError(ImporterError):
    """A URL could not be scraped: unusable URL or unusable response."""


class InvalidUrlError(ScrapeError):
    """Input cannot be parsed as a URL."""


class UnresolvableHandleError(ScrapeError):
    """URL parsed, but no product/collection handle could be found in its path."""


class RemoteFetchError(ImporterError):
    """Storefront JSON endpoint returned a non-2xx status."""

    def __init__(self, status: int, url: str, message: Optional[str] = None):
        self.status = status
        self.url = url
        super().__init__(message or f"HTTP {status} fetching {url}")


class AIServiceError(ImporterError):
    """Generative AI call failed after exhausting retries."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class CatalogMutationError(ImporterError):
    """Shopify returned user errors, or the Admin API call itself failed."""

    def __init__(self, message: str, user_errors: Sequence[Dict[str, Any]] = ()):
        self.user_errors: List[Dict[str, Any]] = list(user_errors)
        super().__init__(message)

    @classmethod
    def from_user_errors(cls, operation: str, user_errors: Sequence[Dict[str, Any]]) -> "CatalogMutationError":
        messages = ", ".join(e.get("message", "unknown error") for e in user_errors)
        return cls(f"{operation} failed: {messages}", user_errors)


class ConfigurationError(ImporterError):
    """Required configuration (e.g. an API key) is missing."""
