"""Load registry definitions from a TOML file.

Each top-level table describes one registry::

    [open-vsx]
    regular = "https://open-vsx.org/api/{}/latest"
    version = "version"
    download = "files.download"

    [open-vsx.list]
    vscode-java = "redhat/java"

The template is accepted under ``regular``, ``prefix`` or ``template``.
Incomplete registries are skipped with a warning so that one bad table does
not stop the others.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from plugsync.errors import ConfigError
from plugsync.models import (
    PluginEntry,
    PluginSpec,
    Registry,
    UrlTemplate,
    parse_descriptor,
)

logger = logging.getLogger(__name__)


class RegistryConfig(BaseModel):
    """One registry table of the configuration file."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    template: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("regular", "prefix", "template"),
        description="Metadata URL; '{}' marks where the remote path goes",
    )
    version: str = Field(..., min_length=1, description="Dotted path to the version string")
    download: str = Field(..., min_length=1, description="Dotted path to the download URL")
    plugins: Any = Field(
        default=None,
        validation_alias=AliasChoices("list", "plugins"),
        description="Plugin name -> remote path",
    )

    def entries(self, registry: str) -> tuple[PluginEntry, ...]:
        if self.plugins is None:
            return ()
        if not isinstance(self.plugins, Mapping):
            logger.warning("%s: 'list' is not a table, ignored", registry)
            return ()

        entries = []
        for name, remote_path in self.plugins.items():
            if not isinstance(remote_path, str):
                logger.warning("%s: %s: remote path is not a string, ignored", registry, name)
                continue
            entries.append(PluginEntry(name=name, remote_path=remote_path))
        return tuple(entries)

    def to_registry(self, registry: str, install_dir: Path) -> Registry:
        spec = PluginSpec(
            registry=registry,
            url_template=UrlTemplate.parse(self.template),
            version_path=parse_descriptor(self.version),
            download_path=parse_descriptor(self.download),
            install_dir=Path(install_dir),
        )
        return Registry(spec=spec, entries=self.entries(registry))


def parse_registries(data: Mapping[str, Any], install_dir: Path) -> list[Registry]:
    """Build registries from an already decoded configuration mapping."""
    registries = []
    for name, table in data.items():
        if not isinstance(table, Mapping):
            logger.debug("%s: not a table, ignored", name)
            continue
        try:
            config = RegistryConfig.model_validate(table)
        except ValidationError as exc:
            logger.warning("%s: missing information", name)
            logger.debug("%s: %s", name, exc)
            continue
        registries.append(config.to_registry(name, install_dir))
    return registries


def load_registries(path: str | Path, install_dir: Path) -> list[Registry]:
    """Read the TOML file at *path* and build its registries.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read configuration: {exc}", path) from exc
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path) from exc

    registries = parse_registries(data, install_dir)
    logger.debug("%s: %d registries", path, len(registries))
    return registries
