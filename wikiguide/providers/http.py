"""
JSON-over-HTTPS client for the MediaWiki endpoints.

Each call is bounded by the configured fetch timeout. Failures are reported
through the provider error taxonomy so the source resolver can treat a
timeout exactly like a non-2xx answer.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from wikiguide.config import Config, get_config
from wikiguide.providers.base import (
    ProviderNotAvailableError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from wikiguide.services.session_manager import SessionManager, session_manager as default_session_manager

logger = logging.getLogger(__name__)


class WikiHttpClient:
    """Thin GET-and-decode wrapper around the shared aiohttp session."""

    def __init__(self, sessions: Optional[SessionManager] = None, config: Optional[Config] = None):
        self.sessions = sessions or default_session_manager
        self.config = config or get_config()

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Raises:
            ProviderTimeoutError: the fetch timeout expired
            ProviderNotAvailableError: network failure or non-2xx status
            ProviderResponseError: body is not JSON or is a MediaWiki error payload
        """
        session = await self.sessions.get_session()
        timeout = aiohttp.ClientTimeout(total=self.config.get_timeout('fetch'))
        host = _host_of(url)
        try:
            async with session.get(url, params=params, timeout=timeout) as resp:
                if resp.status < 200 or resp.status >= 300:
                    raise ProviderNotAvailableError(
                        f"{host} returned status {resp.status}",
                        provider_name=host,
                        details={"status": resp.status, "url": url},
                    )
                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise ProviderResponseError(
                        f"{host} returned a non-JSON body: {e}", provider_name=host
                    )
        except asyncio.TimeoutError:
            raise ProviderTimeoutError(
                f"{host} did not answer within {timeout.total}s", provider_name=host
            )
        except aiohttp.ClientError as e:
            raise ProviderNotAvailableError(f"{host} request failed: {e}", provider_name=host)

        if data is None:
            raise ProviderResponseError(f"{host} returned an empty body", provider_name=host)
        if isinstance(data, dict) and "error" in data:
            error = data.get("error") or {}
            code = error.get("code") if isinstance(error, dict) else error
            raise ProviderResponseError(
                f"{host} returned API error {code}", provider_name=host, details={"error": error}
            )
        return data


def _host_of(url: str) -> str:
    return url.split("://", 1)[-1].split("/", 1)[0]
