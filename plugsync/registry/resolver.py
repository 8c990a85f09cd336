"""Resolve the latest published version of a plugin from its registry."""

from __future__ import annotations

import logging

from plugsync.errors import ValueTypeError, VersionFormatError
from plugsync.models import PluginSpec
from plugsync.registry.client import RegistryClient
from plugsync.registry.json_path import resolve_path
from plugsync.version import Version

logger = logging.getLogger(__name__)


class VersionResolver:
    """Query one registry for ``(latest version, download URL)`` pairs.

    The resolver holds no per-request state and can be shared by every
    concurrent unit of the same registry.

    Args:
        spec: Registry description (URL template and path descriptors).
        client: Open HTTP client used for the metadata request.
    """

    def __init__(self, spec: PluginSpec, client: RegistryClient) -> None:
        self.spec = spec
        self._client = client

    def url_for(self, remote_path: str) -> str:
        return self.spec.url_template.render(remote_path)

    async def resolve(self, remote_path: str) -> tuple[Version, str]:
        """Fetch metadata for *remote_path* and extract version and URL.

        Raises:
            NetworkError, ContentTypeError, ParseError: From the request.
            PathNotFoundError: A path descriptor does not resolve.
            ValueTypeError: The version or download value is not a string.
            VersionFormatError: The version string cannot be parsed.
        """
        url = self.url_for(remote_path)
        document = await self._client.get_json(url)
        return self.parse_document(document, url)

    def parse_document(self, document: object, url: str = "") -> tuple[Version, str]:
        """Extract ``(Version, download_url)`` from a decoded response."""
        version_value = resolve_path(document, self.spec.version_path, "version", url)
        download_value = resolve_path(document, self.spec.download_path, "download", url)

        if not isinstance(version_value, str):
            raise ValueTypeError(
                f"version must be a string, got {type(version_value).__name__}", url
            )
        if not isinstance(download_value, str):
            raise ValueTypeError(
                f"download must be a string, got {type(download_value).__name__}", url
            )

        try:
            version = Version.parse(version_value)
        except VersionFormatError as exc:
            raise VersionFormatError(
                f"version error, {exc.message} in {version_value!r}", url
            ) from exc
        logger.debug("%s: latest %s at %s", url, version, download_value)
        return version, download_value
