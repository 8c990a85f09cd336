"""Tests for plugsync.version."""

from __future__ import annotations

import pytest

from plugsync.errors import ParseError, VersionFormatError
from plugsync.version import Version


class TestParse:
    def test_plain(self):
        assert Version.parse("1.2.3") == Version(1, 2, 3)

    def test_prefix_stripped_from_major(self):
        assert Version.parse("v2.3.4") == Version(2, 3, 4)

    def test_long_prefix_stripped(self):
        assert Version.parse("release-10.0.1") == Version(10, 0, 1)

    @pytest.mark.parametrize("text", ["", "1", "1.2", "v1.2"])
    def test_fewer_than_three_components_is_zero(self, text):
        assert Version.parse(text) == Version(0, 0, 0)

    def test_extra_components_ignored(self):
        assert Version.parse("1.2.3.4") == Version(1, 2, 3)

    def test_leading_zeros_compare_equal(self):
        assert Version.parse("01.2.3") == Version.parse("1.2.3")

    @pytest.mark.parametrize("text", ["1.x.3", "1.2.3-beta", "1..3", "v.1.2", "1.+2.3", "1.2. 3"])
    def test_invalid_component(self, text):
        with pytest.raises(VersionFormatError):
            Version.parse(text)

    def test_version_format_error_is_parse_error(self):
        with pytest.raises(ParseError):
            Version.parse("a.b.c")


class TestOrdering:
    def test_chain(self):
        chain = ["0.0.0", "0.0.1", "0.1.0", "1.0.0", "1.1.1"]
        versions = [Version.parse(v) for v in chain]
        for lower, higher in zip(versions, versions[1:]):
            assert lower < higher
            assert higher > lower

    def test_reflexive(self):
        v = Version.parse("1.2.3")
        assert v == v
        assert v <= v

    def test_numeric_not_lexical(self):
        assert Version.parse("1.10.0") > Version.parse("1.9.0")

    def test_sorting(self):
        versions = [Version(1, 0, 0), Version(0, 9, 9), Version(1, 0, 1)]
        assert sorted(versions) == [Version(0, 9, 9), Version(1, 0, 0), Version(1, 0, 1)]

    def test_hashable(self):
        assert len({Version.parse("1.2.3"), Version.parse("v1.2.3")}) == 1


class TestFormat:
    @pytest.mark.parametrize("text", ["0.0.1", "1.2.3", "10.20.30"])
    def test_round_trip(self, text):
        assert str(Version.parse(text)) == text

    def test_prefix_not_kept(self):
        assert str(Version.parse("v2.3.4")) == "2.3.4"
