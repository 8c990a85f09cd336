"""
plugsync - keep locally installed plugins in sync with remote registries.

Each registry is described declaratively: a metadata URL template, dotted
paths to the version string and download URL inside the JSON response,
and the plugins to manage. plugsync compares the latest published version
with the one recorded in each plugin's ``extension.vsixmanifest`` and
downloads and extracts the archive when they differ.

Example:
    from plugsync import RegistryClient, UpgradeOrchestrator, load_registries

    registries = load_registries("plugins.toml", install_dir=Path("plugins"))
    async with RegistryClient() as client:
        report = await UpgradeOrchestrator(client).run(registries)
"""

__version__ = "0.1.0"

from plugsync.config.registries import load_registries, parse_registries
from plugsync.errors import (
    ArchiveFormatError,
    ConfigError,
    ContentTypeError,
    ManifestFormatError,
    NetworkError,
    ParseError,
    PathNotFoundError,
    PluginIOError,
    PluginSyncError,
    ValueTypeError,
    VersionFormatError,
)
from plugsync.install import ArchiveInstaller, InstalledVersionReader
from plugsync.models import PluginEntry, PluginSpec, Registry, UrlTemplate
from plugsync.orchestrator import SyncReport, UnitOutcome, UnitStatus, UpgradeOrchestrator
from plugsync.registry import RegistryClient, VersionResolver, resolve_path
from plugsync.version import Version

__all__ = [
    "ArchiveFormatError",
    "ArchiveInstaller",
    "ConfigError",
    "ContentTypeError",
    "InstalledVersionReader",
    "ManifestFormatError",
    "NetworkError",
    "ParseError",
    "PathNotFoundError",
    "PluginEntry",
    "PluginIOError",
    "PluginSpec",
    "PluginSyncError",
    "Registry",
    "RegistryClient",
    "SyncReport",
    "UnitOutcome",
    "UnitStatus",
    "UpgradeOrchestrator",
    "UrlTemplate",
    "ValueTypeError",
    "Version",
    "VersionFormatError",
    "VersionResolver",
    "__version__",
    "load_registries",
    "parse_registries",
    "resolve_path",
]
