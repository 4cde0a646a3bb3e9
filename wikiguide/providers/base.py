"""
Provider base interfaces and the provider error taxonomy.

Every wiki-backed provider shares:
- an injected HTTP client and cache
- a per-class logger
- the same failure contract: upstream problems surface as ProviderError
  subclasses from the HTTP layer and are turned into "no data" here, never
  propagated to callers of the guide service
"""

from abc import ABC
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging

from wikiguide.cache import TTLCache
from wikiguide.config import Config, get_config


@dataclass
class ProviderMetadata:
    """Metadata about a provider."""
    name: str
    description: str
    capabilities: list


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Dict] = None):
        """Initialize provider error.

        Args:
            message: Error message
            provider_name: Name of the provider (or upstream host) that failed
            details: Additional error details
        """
        super().__init__(message)
        self.provider_name = provider_name
        self.details = details or {}


class ProviderNotAvailableError(ProviderError):
    """Raised on network failure or a non-2xx upstream response."""
    pass


class ProviderTimeoutError(ProviderError):
    """Raised when an upstream request exceeds its fetch timeout."""
    pass


class ProviderResponseError(ProviderError):
    """Raised when an upstream answers with a malformed or error body."""
    pass


class WikiProvider(ABC):
    """Base class for providers that read from MediaWiki sites.

    Subclasses must set ``metadata``.
    """

    metadata: ProviderMetadata

    def __init__(self, http, cache: TTLCache, config: Optional[Config] = None):
        """Initialize the provider.

        Args:
            http: Client exposing ``async get_json(url, params=None)``
            cache: Shared TTL cache
            config: Configuration, defaults to the global instance
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.http = http
        self.cache = cache
        self.config = config or get_config()

    def get_metadata(self) -> ProviderMetadata:
        """Describe this provider."""
        return self.metadata

    def _cached(self, key: str) -> Optional[Any]:
        value = self.cache.get(key)
        if value is not None:
            self.logger.debug(f"Cache hit for {key}")
        return value

    def _store(self, key: str, value: Any) -> None:
        # None and empty results are not pinned for a whole TTL
        if value:
            self.cache.set(key, value)
