"""Local side of the pipeline: installed-version lookup and archive extraction."""

from plugsync.install.archive import ArchiveInstaller
from plugsync.install.manifest import MANIFEST_NAME, InstalledVersionReader

__all__ = [
    "ArchiveInstaller",
    "InstalledVersionReader",
    "MANIFEST_NAME",
]
