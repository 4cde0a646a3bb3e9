"""
Session management for proper resource handling and connection pooling.

All providers share one aiohttp session created lazily by the manager and
closed on application shutdown.
"""

import asyncio
import aiohttp
from typing import Optional

from wikiguide.config import get_config


class SessionManager:
    """Centralized HTTP session manager.

    A lock guards session creation so concurrent guide requests on first use
    do not each open their own connection pool.
    """

    def __init__(self, user_agent: Optional[str] = None):
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock: Optional[asyncio.Lock] = None
        self._user_agent = user_agent

    async def get_session(self) -> aiohttp.ClientSession:
        """Get the shared HTTP session, creating it if necessary."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if self._session is None or self._session.closed:
                self._session = self._create_session()
            return self._session

    def _create_session(self) -> aiohttp.ClientSession:
        """Create a new HTTP session with proper configuration."""
        config = get_config()
        timeout = aiohttp.ClientTimeout(total=config.get_timeout('api'))

        connector = aiohttp.TCPConnector(
            limit=100,
            limit_per_host=20,
            enable_cleanup_closed=True,
            keepalive_timeout=30.0,
            ttl_dns_cache=300,
            use_dns_cache=True
        )

        return aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers={
                'User-Agent': self._user_agent or config.source_config.user_agent,
                'Accept': 'application/json',
            }
        )

    async def close(self):
        """Close the shared session and clean up resources."""
        if self._lock is None:
            return
        async with self._lock:
            if self._session and not self._session.closed:
                await self._session.close()
            self._session = None


# Global session manager instance
session_manager = SessionManager()


async def close_session():
    """Close the global session manager.

    This should be called during application shutdown.
    """
    await session_manager.close()
