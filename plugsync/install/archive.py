"""Extract downloaded plugin archives onto the filesystem.

Extraction overwrites files in place, so installing the same archive twice
into the same directory leaves the same result as installing it once.
Members that would land outside the target directory are refused.
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
import shutil
import stat
import zipfile
import zlib
from pathlib import Path, PurePosixPath

from plugsync.errors import ArchiveFormatError, PluginIOError

logger = logging.getLogger(__name__)

# ZipInfo.create_system value for archives written on Unix.
_UNIX_SYSTEM = 3

SUPPORTS_UNIX_MODE = os.name == "posix"


def unix_mode(info: zipfile.ZipInfo) -> int | None:
    """Permission bits declared by a zip member, or None if it declares none."""
    if info.create_system != _UNIX_SYSTEM:
        return None
    mode = stat.S_IMODE(info.external_attr >> 16)
    return mode or None


class ArchiveInstaller:
    """Install zip archives into plugin directories.

    Args:
        chunk_size: Buffer size used when copying member content.
        restore_permissions: Apply the member's unix mode to written files.
            Ignored on platforms without unix permission bits.
    """

    def __init__(self, chunk_size: int = 64 * 1024, restore_permissions: bool = True) -> None:
        self.chunk_size = chunk_size
        self.restore_permissions = restore_permissions and SUPPORTS_UNIX_MODE

    async def install(self, archive: bytes, target_dir: Path) -> int:
        """Extract *archive* into *target_dir* without blocking the event loop.

        Returns:
            Number of files written.
        """
        return await asyncio.to_thread(self.extract, archive, target_dir)

    def extract(self, archive: bytes, target_dir: Path) -> int:
        """Extract every file member of *archive* into *target_dir*.

        Directory members are skipped; parent directories are created on
        demand for each file.

        Raises:
            ArchiveFormatError: Not a zip archive, a corrupt member, or a
                member path escaping *target_dir*.
            PluginIOError: A directory or file could not be written.
        """
        target_dir = Path(target_dir)
        try:
            zf = zipfile.ZipFile(io.BytesIO(archive))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
            raise ArchiveFormatError(f"read zip archive: {exc}", target_dir) from exc

        written = 0
        with zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                destination = self._destination(target_dir, info.filename)
                self._write_member(zf, info, destination)
                written += 1

        logger.debug("%s: extracted %d files", target_dir, written)
        return written

    def _destination(self, target_dir: Path, member_name: str) -> Path:
        relative = PurePosixPath(member_name.replace("\\", "/"))
        if relative.is_absolute() or ".." in relative.parts or os.path.isabs(member_name):
            raise ArchiveFormatError(
                f"member {member_name!r} escapes the target directory", target_dir
            )
        if not relative.parts:
            raise ArchiveFormatError(f"member {member_name!r} has no file name", target_dir)
        return target_dir.joinpath(*relative.parts)

    def _write_member(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo, destination: Path) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PluginIOError(f"create dir: {exc.strerror or exc}", destination.parent, exc) from exc

        try:
            _ensure_writable(destination)
            with zf.open(info) as source, open(destination, "wb") as target:
                shutil.copyfileobj(source, target, self.chunk_size)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as exc:
            raise ArchiveFormatError(f"read {info.filename!r}: {exc}", destination) from exc
        except OSError as exc:
            raise PluginIOError(f"write file: {exc.strerror or exc}", destination, exc) from exc

        mode = unix_mode(info)
        if self.restore_permissions and mode is not None:
            try:
                os.chmod(destination, mode)
            except OSError as exc:
                raise PluginIOError(f"set permission: {exc.strerror or exc}", destination, exc) from exc


def _ensure_writable(path: Path) -> None:
    # A previous install may have left the file read-only.
    try:
        current = path.stat().st_mode
    except FileNotFoundError:
        return
    if stat.S_ISREG(current) and not current & stat.S_IWUSR:
        os.chmod(path, stat.S_IMODE(current) | stat.S_IWUSR)
