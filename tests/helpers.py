"""Test builders for archives, registries and mocked HTTP clients."""

from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path
from typing import Callable

import httpx

from plugsync.models import PluginEntry, PluginSpec, Registry, UrlTemplate, parse_descriptor
from plugsync.registry.client import RegistryClient

REGISTRY_URL = "https://registry.test/api/{}/latest"


def manifest_xml(version: str | None = "1.0.0") -> str:
    attr = f' Version="{version}"' if version is not None else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<PackageManifest Version="2.0.0" '
        'xmlns="http://schemas.microsoft.com/developer/vsx-schema/2011">\n'
        "  <Metadata>\n"
        f'    <Identity Language="en-US" Id="demo"{attr} Publisher="test"/>\n'
        "    <DisplayName>Demo</DisplayName>\n"
        "  </Metadata>\n"
        "</PackageManifest>\n"
    )


def make_zip(files: dict[str, bytes | str], modes: dict[str, int] | None = None) -> bytes:
    """Build a zip archive in memory; *modes* maps member names to unix modes."""
    modes = modes or {}
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.compress_type = zipfile.ZIP_DEFLATED
            if name in modes:
                info.create_system = 3
                info.external_attr = (0o100000 | modes[name]) << 16
            zf.writestr(info, content)
    return buffer.getvalue()


def plugin_archive(version: str, extra: dict[str, bytes | str] | None = None) -> bytes:
    files: dict[str, bytes | str] = {"extension.vsixmanifest": manifest_xml(version)}
    files.update(extra or {})
    return make_zip(files)


def make_spec(
    install_dir: Path,
    registry: str = "test",
    template: str = REGISTRY_URL,
    version: str = "version",
    download: str = "files.download",
) -> PluginSpec:
    return PluginSpec(
        registry=registry,
        url_template=UrlTemplate.parse(template),
        version_path=parse_descriptor(version),
        download_path=parse_descriptor(download),
        install_dir=install_dir,
    )


def make_registry(install_dir: Path, names: list[str], **kwargs) -> Registry:
    spec = make_spec(install_dir, **kwargs)
    return Registry(spec=spec, entries=tuple(PluginEntry(n, f"pub/{n}") for n in names))


def json_response(data: object, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json"},
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> RegistryClient:
    transport = httpx.MockTransport(handler)
    return RegistryClient(client=httpx.AsyncClient(transport=transport, follow_redirects=True))
