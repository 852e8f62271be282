"""
Soccerverse Bot - Data Pack Source
==================================

Downloads the third-party data pack over HTTP.

Features:
- Lazily created aiohttp session, closed on shutdown
- Request-level timeout so callers are never blocked indefinitely
- Transport and document-shape failures mapped to the mapping error taxonomy

Author: Soccerverse Bot
"""

import asyncio
import json
from types import TracebackType
from typing import Any, Optional, Type

import aiohttp

from svbot.core.config import DATA_PACK_TIMEOUT, USER_AGENT
from svbot.core.logger import logger
from svbot.mappings.errors import MalformedDocument, TransportFailure


# =============================================================================
# Remote Data Source
# =============================================================================

class RemoteDataSource:
    """Fetches the data pack JSON document from a fixed URL."""

    def __init__(
        self,
        url: str,
        timeout: float = DATA_PACK_TIMEOUT,
        user_agent: str = USER_AGENT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """
        Initialize the source.

        Args:
            url: Data pack URL
            timeout: Total request timeout in seconds
            user_agent: User-Agent header sent with the request
            session: Optional externally owned session (not closed by close())
        """
        self.url: str = url
        self.timeout = aiohttp.ClientTimeout(total=timeout, connect=min(10.0, timeout))
        self.headers: dict[str, str] = {"User-Agent": user_agent}
        self.session: Optional[aiohttp.ClientSession] = session
        self._owns_session: bool = session is None

    async def __aenter__(self) -> "RemoteDataSource":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        """Close the HTTP session if this source created it."""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    # -------------------------------------------------------------------------
    # Fetch
    # -------------------------------------------------------------------------

    async def fetch(self) -> dict[str, Any]:
        """
        Download and decode the data pack.

        Returns:
            The raw document, guaranteed to hold a PackData object

        Raises:
            TransportFailure: Network error, timeout or non-2xx status
            MalformedDocument: Body is not JSON or has no PackData object
        """
        logger.info("🌐 Downloading Data Pack", [
            ("URL", self.url),
            ("Timeout", f"{self.timeout.total:.0f}s"),
        ])

        session = self._get_session()
        try:
            async with session.get(self.url, headers=self.headers, timeout=self.timeout) as response:
                if response.status < 200 or response.status >= 300:
                    raise TransportFailure(
                        f"Data pack request returned HTTP {response.status}",
                        status=response.status,
                    )
                body = await response.text()
        except asyncio.TimeoutError as e:
            raise TransportFailure(f"Data pack request timed out after {self.timeout.total:.0f}s") from e
        except aiohttp.ClientError as e:
            raise TransportFailure(f"Data pack request failed: {e}") from e

        document = self.parse_document(body)
        logger.success("Data Pack Downloaded", [
            ("Size", f"{len(body) / 1024:.1f} KB"),
            ("Sections", ", ".join(sorted(document["PackData"])) or "None"),
        ])
        return document

    @staticmethod
    def parse_document(body: str) -> dict[str, Any]:
        """
        Decode a response body into a data pack document.

        Raises:
            MalformedDocument: Invalid JSON, non-object root, or no PackData object
        """
        try:
            document = json.loads(body)
        except (json.JSONDecodeError, TypeError) as e:
            raise MalformedDocument(f"Data pack is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise MalformedDocument("Data pack root is not an object")
        if not isinstance(document.get("PackData"), dict):
            raise MalformedDocument("Data pack has no PackData object")
        return document


__all__ = ["RemoteDataSource"]
