"""Read the installed version of a plugin from ``extension.vsixmanifest``.

The manifest is scanned in a single forward pass and scanning stops at the
first ``Identity`` element without content, e.g.::

    <PackageManifest Version="2.0.0" xmlns="http://schemas.microsoft.com/developer/vsx-schema/2011">
      <Metadata>
        <Identity Language="en-US" Id="java" Version="1.2.0" Publisher="redhat"/>
      </Metadata>
    </PackageManifest>

Element names are compared without their namespace; the attribute must be
the unqualified ``Version``.
"""

from __future__ import annotations

import asyncio
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from plugsync.errors import ManifestFormatError, PluginIOError, VersionFormatError
from plugsync.version import Version

logger = logging.getLogger(__name__)

MANIFEST_NAME = "extension.vsixmanifest"
IDENTITY_TAG = "Identity"
VERSION_ATTRIBUTE = "Version"

_CHUNK_SIZE = 16 * 1024


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _is_empty(element: ET.Element) -> bool:
    return len(element) == 0 and not (element.text or "").strip()


def scan_identity_version(content: bytes, source: str | Path = "") -> str:
    """Return the ``Version`` attribute of the first empty ``Identity``.

    Raises:
        ManifestFormatError: Malformed XML, no such element, or the element
            has no ``Version`` attribute.
    """
    parser = ET.XMLPullParser(events=("end",))
    try:
        for offset in range(0, len(content), _CHUNK_SIZE):
            parser.feed(content[offset:offset + _CHUNK_SIZE])
            for _event, element in parser.read_events():
                if _local_name(element.tag) == IDENTITY_TAG and _is_empty(element):
                    logger.debug("%s: %s %s", source, IDENTITY_TAG, element.attrib)
                    version = element.get(VERSION_ATTRIBUTE)
                    if version is None:
                        raise ManifestFormatError(
                            f"{IDENTITY_TAG} has no {VERSION_ATTRIBUTE} attribute", source
                        )
                    return version
                # Finished subtrees are never looked at again.
                element.clear()
        parser.close()
    except ET.ParseError as exc:
        line, column = exc.position
        raise ManifestFormatError(f"error at {line}:{column}, {exc}", source) from exc

    raise ManifestFormatError(f"not find {IDENTITY_TAG}.{VERSION_ATTRIBUTE}", source)


class InstalledVersionReader:
    """Report which version of a plugin is installed, if any.

    Args:
        manifest_name: File name of the manifest inside a plugin directory.
    """

    def __init__(self, manifest_name: str = MANIFEST_NAME) -> None:
        self.manifest_name = manifest_name

    def manifest_path(self, install_dir: Path, name: str) -> Path:
        return Path(install_dir) / name / self.manifest_name

    async def read(self, install_dir: Path, name: str) -> Version | None:
        """Return the installed version, or None when not installed.

        A missing manifest (or plugin directory) is the normal state before
        the first install and is not an error.

        Raises:
            PluginIOError: The manifest exists but cannot be read.
            ManifestFormatError: The manifest holds no usable version.
            VersionFormatError: The version attribute cannot be parsed.
        """
        path = self.manifest_path(install_dir, name)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("%s: not installed", name)
            return None
        except OSError as exc:
            raise PluginIOError(f"read manifest: {exc.strerror or exc}", path, exc) from exc

        raw_version = scan_identity_version(content, path)
        try:
            return Version.parse(raw_version)
        except VersionFormatError as exc:
            raise VersionFormatError(f"parse version, {exc.message} in {raw_version!r}", path) from exc
