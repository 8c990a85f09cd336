"""Async HTTP access to plugin registries.

Wraps a single :class:`httpx.AsyncClient` shared by every unit of a run.
Redirects are always followed; registries commonly redirect both metadata
and asset requests to a CDN.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from plugsync import __version__
from plugsync.errors import ContentTypeError, NetworkError, ParseError

logger = logging.getLogger(__name__)

USER_AGENT = f"plugsync/{__version__}"
DEFAULT_TIMEOUT = 60.0


def is_json_media_type(content_type: str) -> bool:
    """True for ``application/json`` and ``application/<anything>+json``."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json":
        return True
    return media_type.startswith("application/") and media_type.endswith("+json")


class RegistryClient:
    """Perform GET requests against registries and asset hosts.

    Use as an async context manager. When *client* is given it is used as-is
    and left open on exit; otherwise a client is created and closed here.

    Args:
        timeout: Seconds per transport operation, ``None`` for no limit.
        client: Pre-built client (tests inject one with a mock transport).
    """

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "RegistryClient":
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("RegistryClient used outside 'async with'")
        try:
            response = await self._client.get(url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(str(exc) or type(exc).__name__, url) from exc

        if not response.is_success:
            raise NetworkError(
                f"HTTP {response.status_code} {response.reason_phrase}",
                url,
                status_code=response.status_code,
            )
        logger.debug("GET %s -> %s (%d bytes)", url, response.status_code, len(response.content))
        return response

    async def get_json(self, url: str) -> Any:
        """GET *url* and decode its JSON body.

        Raises:
            NetworkError: Malformed URL, transport failure or non-2xx status.
            ContentTypeError: The response is not declared as JSON.
            ParseError: The body is not valid JSON.
        """
        response = await self._get(url)
        content_type = response.headers.get("content-type", "")
        if not is_json_media_type(content_type):
            raise ContentTypeError(
                f"expected JSON, got {content_type or 'no content type'!r}", url
            )
        try:
            return json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseError(f"invalid JSON: {exc}", url) from exc

    async def get_bytes(self, url: str) -> bytes:
        """GET *url* and return the raw body.

        Raises:
            NetworkError: Transport failure or non-2xx status.
        """
        response = await self._get(url)
        return response.content
