"""Tests for plugsync.install.archive."""

from __future__ import annotations

import io
import os
import stat
import zipfile

import pytest

from helpers import make_zip
from plugsync.errors import ArchiveFormatError, PluginIOError
from plugsync.install.archive import ArchiveInstaller, unix_mode

posix_only = pytest.mark.skipif(os.name != "posix", reason="needs unix permission bits")


class TestUnixMode:
    def test_unix_member(self):
        info = zipfile.ZipInfo("bin/tool")
        info.create_system = 3
        info.external_attr = 0o100755 << 16
        assert unix_mode(info) == 0o755

    def test_dos_member_declares_nothing(self):
        info = zipfile.ZipInfo("a.txt")
        info.create_system = 0
        info.external_attr = 0o100755 << 16
        assert unix_mode(info) is None

    def test_zero_mode_declares_nothing(self):
        info = zipfile.ZipInfo("a.txt")
        info.create_system = 3
        info.external_attr = 0
        assert unix_mode(info) is None


class TestExtract:
    def test_writes_files_byte_for_byte(self, tmp_path):
        payload = bytes(range(256)) * 100
        archive = make_zip({"a.txt": "hello", "deep/nested/dir/blob.bin": payload})

        written = ArchiveInstaller().extract(archive, tmp_path / "java")

        assert written == 2
        assert (tmp_path / "java" / "a.txt").read_text() == "hello"
        assert (tmp_path / "java" / "deep/nested/dir/blob.bin").read_bytes() == payload

    def test_directory_entries_skipped(self, tmp_path):
        archive = make_zip({"empty/": b"", "dir/file.txt": "x"})
        written = ArchiveInstaller().extract(archive, tmp_path)
        assert written == 1
        assert not (tmp_path / "empty").exists()
        assert (tmp_path / "dir" / "file.txt").exists()

    def test_idempotent_overwrite(self, tmp_path):
        installer = ArchiveInstaller()
        installer.extract(make_zip({"a.txt": "old content that is longer"}), tmp_path)
        (tmp_path / "stale.txt").write_text("left alone")

        installer.extract(make_zip({"a.txt": "new"}), tmp_path)
        installer.extract(make_zip({"a.txt": "new"}), tmp_path)

        assert (tmp_path / "a.txt").read_text() == "new"
        assert (tmp_path / "stale.txt").read_text() == "left alone"

    @posix_only
    def test_restores_permissions(self, tmp_path):
        archive = make_zip(
            {"bin/server": "#!/bin/sh\n", "README": "docs", "conf.ini": "x"},
            modes={"bin/server": 0o755, "conf.ini": 0o600},
        )
        ArchiveInstaller().extract(archive, tmp_path)

        assert stat.S_IMODE((tmp_path / "bin/server").stat().st_mode) == 0o755
        assert stat.S_IMODE((tmp_path / "conf.ini").stat().st_mode) == 0o600

    @posix_only
    def test_read_only_file_reinstalled(self, tmp_path):
        archive = make_zip({"lib.js": "v1"}, modes={"lib.js": 0o444})
        installer = ArchiveInstaller()
        installer.extract(archive, tmp_path)
        assert stat.S_IMODE((tmp_path / "lib.js").stat().st_mode) == 0o444

        installer.extract(make_zip({"lib.js": "v2"}, modes={"lib.js": 0o444}), tmp_path)
        assert (tmp_path / "lib.js").read_text() == "v2"

    def test_restore_disabled_by_flag(self):
        assert ArchiveInstaller(restore_permissions=False).restore_permissions is False

    def test_not_a_zip(self, tmp_path):
        with pytest.raises(ArchiveFormatError, match="read zip archive"):
            ArchiveInstaller().extract(b"<html>not found</html>", tmp_path)

    def test_empty_bytes(self, tmp_path):
        with pytest.raises(ArchiveFormatError):
            ArchiveInstaller().extract(b"", tmp_path)

    @pytest.mark.parametrize("name", ["../evil.txt", "a/../../evil.txt", "/etc/evil.txt"])
    def test_rejects_escaping_members(self, tmp_path, name):
        target = tmp_path / "plugin"
        with pytest.raises(ArchiveFormatError, match="escapes"):
            ArchiveInstaller().extract(make_zip({name: "x"}), target)
        assert not (tmp_path / "evil.txt").exists()

    @pytest.mark.parametrize("name", [".", "./."])
    def test_rejects_members_without_file_name(self, tmp_path, name):
        target = tmp_path / "plugin"
        with pytest.raises(ArchiveFormatError):
            ArchiveInstaller().extract(make_zip({name: "x", "a.txt": "y"}), target)
        assert not target.is_file()

    def test_write_failure_names_path(self, tmp_path):
        # A file where a directory is needed.
        (tmp_path / "dir").write_text("blocking file")
        with pytest.raises(PluginIOError) as info:
            ArchiveInstaller().extract(make_zip({"dir/file.txt": "x"}), tmp_path)
        assert info.value.path == tmp_path / "dir"

    def test_corrupt_member(self, tmp_path):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_STORED) as zf:
            zf.writestr("a.txt", b"a" * 200)
        archive = bytearray(buffer.getvalue())
        # Local header is 30 bytes plus the 5 byte name; stored data follows.
        archive[50:60] = b"b" * 10
        with pytest.raises(ArchiveFormatError, match="a.txt"):
            ArchiveInstaller().extract(bytes(archive), tmp_path)

    @pytest.mark.asyncio
    async def test_install_runs_off_loop(self, tmp_path):
        written = await ArchiveInstaller().install(make_zip({"x": "y"}), tmp_path)
        assert written == 1
        assert (tmp_path / "x").read_text() == "y"
