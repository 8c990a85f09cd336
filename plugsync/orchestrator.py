"""Concurrent update of every configured plugin.

One unit of work runs per (registry, plugin name). Inside a unit the
installed version and the latest published version are looked up
concurrently, then the unit either skips, or downloads and installs.

Unit States:
    - SKIPPED: The installed version equals the latest one
    - INSTALLED: The latest archive was downloaded and extracted
    - UPDATE_AVAILABLE: Dry run only, an install would have happened
    - FAILED: Any step failed; the error is kept on the outcome

A failing unit never affects the others: every unit runs to completion
and :meth:`UpgradeOrchestrator.run` returns all outcomes.

Example:
    async with RegistryClient() as client:
        orchestrator = UpgradeOrchestrator(client)
        report = await orchestrator.run(registries)
    for outcome in report.failed:
        print(outcome.name, outcome.error)
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from plugsync.errors import PluginSyncError
from plugsync.install.archive import ArchiveInstaller
from plugsync.install.manifest import InstalledVersionReader
from plugsync.models import PluginEntry, PluginSpec, Registry
from plugsync.registry.client import RegistryClient
from plugsync.registry.resolver import VersionResolver
from plugsync.version import Version

logger = logging.getLogger(__name__)


class UnitStatus(str, Enum):
    """Terminal states of a unit."""

    SKIPPED = "skipped"
    INSTALLED = "installed"
    UPDATE_AVAILABLE = "update_available"
    FAILED = "failed"


@dataclass
class UnitOutcome:
    """Result of one (registry, plugin name) unit.

    Attributes:
        registry: Registry the plugin belongs to.
        name: Plugin name.
        status: Terminal state.
        installed: Version found on disk before the run, if any.
        latest: Latest published version, if it could be resolved.
        download_url: Where the latest archive lives, if resolved.
        error: The failure, for FAILED outcomes.
    """

    registry: str
    name: str
    status: UnitStatus
    installed: Version | None = None
    latest: Version | None = None
    download_url: str | None = None
    error: BaseException | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "registry": self.registry,
            "name": self.name,
            "status": self.status.value,
            "installed": str(self.installed) if self.installed else None,
            "latest": str(self.latest) if self.latest else None,
            "download_url": self.download_url,
            "error": str(self.error) if self.error else None,
        }


@dataclass
class SyncReport:
    """All unit outcomes of one run, in configuration order."""

    outcomes: list[UnitOutcome] = field(default_factory=list)

    @property
    def counts(self) -> dict[UnitStatus, int]:
        counter = Counter(outcome.status for outcome in self.outcomes)
        return {status: counter.get(status, 0) for status in UnitStatus}

    @property
    def failed(self) -> list[UnitOutcome]:
        return [o for o in self.outcomes if o.status == UnitStatus.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed


class UpgradeOrchestrator:
    """Run one concurrent unit per configured plugin.

    Args:
        client: Open HTTP client shared by all units.
        reader: Installed-version reader.
        installer: Archive installer.
        dry_run: Resolve versions but never download or install.
    """

    def __init__(
        self,
        client: RegistryClient,
        reader: InstalledVersionReader | None = None,
        installer: ArchiveInstaller | None = None,
        dry_run: bool = False,
    ) -> None:
        self.client = client
        self.reader = reader or InstalledVersionReader()
        self.installer = installer or ArchiveInstaller()
        self.dry_run = dry_run

    async def run(self, registries: Iterable[Registry]) -> SyncReport:
        """Update every plugin of every registry concurrently."""
        units = []
        for registry in registries:
            resolver = VersionResolver(registry.spec, self.client)
            for entry in registry.entries:
                units.append(self.upgrade(registry.spec, entry, resolver))

        outcomes = await asyncio.gather(*units)
        report = SyncReport(outcomes=list(outcomes))
        logger.debug(
            "sync finished: %s",
            ", ".join(f"{status.value}={count}" for status, count in report.counts.items()),
        )
        return report

    async def upgrade(
        self,
        spec: PluginSpec,
        entry: PluginEntry,
        resolver: VersionResolver | None = None,
    ) -> UnitOutcome:
        """Bring one plugin up to date and report what happened."""
        resolver = resolver or VersionResolver(spec, self.client)
        outcome = UnitOutcome(registry=spec.registry, name=entry.name, status=UnitStatus.FAILED)
        try:
            await self._upgrade(spec, entry, resolver, outcome)
        except PluginSyncError as exc:
            outcome.status = UnitStatus.FAILED
            outcome.error = exc
            logger.warning("%s: %s", entry.name, exc)
        except Exception as exc:
            outcome.status = UnitStatus.FAILED
            outcome.error = exc
            logger.exception("%s: unexpected error", entry.name)
        return outcome

    async def _upgrade(
        self,
        spec: PluginSpec,
        entry: PluginEntry,
        resolver: VersionResolver,
        outcome: UnitOutcome,
    ) -> None:
        installed_result, latest_result = await asyncio.gather(
            self.reader.read(spec.install_dir, entry.name),
            resolver.resolve(entry.remote_path),
            return_exceptions=True,
        )
        for result in (installed_result, latest_result):
            if isinstance(result, BaseException):
                raise result

        installed: Version | None = installed_result  # type: ignore[assignment]
        latest, download_url = latest_result  # type: ignore[misc]
        outcome.installed = installed
        outcome.latest = latest
        outcome.download_url = download_url

        # Equality alone decides; a newer local version is not protected.
        if installed == latest:
            logger.debug("%s: latest %s is installed", entry.name, latest)
            outcome.status = UnitStatus.SKIPPED
            return

        action = "install" if installed is None else f"upgrade {installed} to"
        if self.dry_run:
            logger.info("%s: %s %s available from %s", entry.name, action, latest, download_url)
            outcome.status = UnitStatus.UPDATE_AVAILABLE
            return

        logger.info("%s: %s %s from %s", entry.name, action, latest, download_url)
        archive = await self.client.get_bytes(download_url)
        await self.installer.install(archive, spec.plugin_dir(entry.name))
        outcome.status = UnitStatus.INSTALLED
