"""Comparable ``major.minor.patch`` versions with a tolerant parser."""

from __future__ import annotations

from dataclasses import dataclass

from plugsync.errors import VersionFormatError


@dataclass(frozen=True, order=True)
class Version:
    """A version triple ordered lexicographically by (major, minor, patch)."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a dotted version string.

        Only the first three dot-separated components are used. Fewer than
        three components yields ``0.0.0``. Leading non-digit characters are
        stripped from the major component so ``"v2.3.4"`` parses as
        ``2.3.4``.

        Raises:
            VersionFormatError: If a used component is not a plain decimal
                number.
        """
        parts = text.split(".")
        if len(parts) < 3:
            return cls()

        major = parts[0]
        while major and not major[0].isdigit():
            major = major[1:]

        return cls(
            _component(major, text),
            _component(parts[1], text),
            _component(parts[2], text),
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _component(value: str, original: str) -> int:
    if not value or not (value.isascii() and value.isdigit()):
        raise VersionFormatError(
            f"invalid version component {value!r}", context=original
        )
    return int(value)
