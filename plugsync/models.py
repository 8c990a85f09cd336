"""Immutable descriptions of registries and the plugins they publish.

A :class:`PluginSpec` is built once per configured registry and shared
read-only by every concurrent unit working on that registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

PLACEHOLDER = "{}"

PathDescriptor = tuple[str, ...]


def parse_descriptor(text: str) -> PathDescriptor:
    """Split a dotted path such as ``"files.download"`` into its keys."""
    return tuple(text.split("."))


@dataclass(frozen=True)
class UrlTemplate:
    """A metadata URL split around the plugin's remote path.

    Attributes:
        prefix: Text placed before the remote path.
        suffix: Text placed after the remote path.
    """

    prefix: str
    suffix: str = ""

    @classmethod
    def parse(cls, template: str) -> "UrlTemplate":
        """Split *template* on the first ``{}``; without one it is all prefix."""
        prefix, marker, suffix = template.partition(PLACEHOLDER)
        if not marker:
            return cls(prefix=template)
        return cls(prefix=prefix, suffix=suffix)

    def render(self, remote_path: str) -> str:
        return f"{self.prefix}{remote_path}{self.suffix}"

    def __str__(self) -> str:
        return f"{self.prefix}{PLACEHOLDER}{self.suffix}"


@dataclass(frozen=True)
class PluginSpec:
    """How to query one registry and where its plugins are installed.

    Attributes:
        registry: Name of the registry (the config table key).
        url_template: Metadata URL template.
        version_path: Keys leading to the version string in the response.
        download_path: Keys leading to the download URL in the response.
        install_dir: Directory holding one sub-directory per plugin.
    """

    registry: str
    url_template: UrlTemplate
    version_path: PathDescriptor
    download_path: PathDescriptor
    install_dir: Path

    def plugin_dir(self, name: str) -> Path:
        return self.install_dir / name


@dataclass(frozen=True)
class PluginEntry:
    """One plugin listed by a registry.

    Attributes:
        name: Local plugin name, also the install sub-directory.
        remote_path: Substituted into the URL template placeholder.
    """

    name: str
    remote_path: str


@dataclass(frozen=True)
class Registry:
    """A registry spec together with the plugins it manages."""

    spec: PluginSpec
    entries: tuple[PluginEntry, ...] = field(default_factory=tuple)
