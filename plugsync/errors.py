"""Exceptions raised by the plugsync update pipeline.

Every error carries a ``context`` string (a URL, a manifest path or an
archive target) so that a single log line is enough to locate the problem.
"""

from __future__ import annotations

from pathlib import Path


class PluginSyncError(Exception):
    """Base exception for plugsync errors.

    Attributes:
        message: Description of what went wrong.
        context: Where it went wrong (URL, file path, ...).
    """

    def __init__(self, message: str, context: str | Path = "") -> None:
        self.message = message
        self.context = str(context)
        super().__init__(f"{self.context}, {message}" if self.context else message)


class ConfigError(PluginSyncError):
    """The registry configuration file could not be loaded."""
    pass


class NetworkError(PluginSyncError):
    """Transport failure or non-2xx HTTP status.

    Attributes:
        status_code: HTTP status code, or None for transport failures.
    """

    def __init__(
        self,
        message: str,
        context: str | Path = "",
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, context)


class ContentTypeError(PluginSyncError):
    """The registry answered with something other than JSON."""
    pass


class ParseError(PluginSyncError):
    """A document (JSON, XML) or a version string could not be parsed."""
    pass


class VersionFormatError(ParseError):
    """A version string is not ``major.minor.patch``."""
    pass


class ManifestFormatError(ParseError):
    """An ``extension.vsixmanifest`` exists but holds no usable version."""
    pass


class PathNotFoundError(PluginSyncError):
    """A path descriptor did not resolve inside a JSON document.

    Attributes:
        path_name: Which descriptor failed (``"version"`` or ``"download"``).
        key: The key that could not be found.
    """

    def __init__(
        self,
        path_name: str,
        key: str,
        context: str | Path = "",
    ) -> None:
        self.path_name = path_name
        self.key = key
        super().__init__(f"not find {path_name} (missing {key!r})", context)


class ValueTypeError(PluginSyncError):
    """A JSON value has the wrong type (e.g. version is not a string)."""
    pass


class ArchiveFormatError(PluginSyncError):
    """Downloaded bytes are not a usable zip archive."""
    pass


class PluginIOError(PluginSyncError):
    """Filesystem failure while reading a manifest or writing a plugin.

    Attributes:
        path: The file or directory that could not be accessed.
        original: The underlying OSError.
    """

    def __init__(self, message: str, path: str | Path, original: OSError | None = None) -> None:
        self.path = Path(path)
        self.original = original
        super().__init__(message, path)
