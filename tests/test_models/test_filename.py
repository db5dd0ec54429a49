"""Unit tests for distsift.models.filename module."""

from __future__ import annotations

import pytest
from packaging.tags import Tag
from packaging.version import Version

from distsift.models.filename import (
    SourceDistExtension,
    SourceDistFilename,
    WheelFilename,
    parse_dist_filename,
)


@pytest.mark.unit
class TestWheelFilename:
    """Tests for WheelFilename parsing."""

    def test_parse_basic(self) -> None:
        wheel = WheelFilename.parse("idna-3.6-py3-none-any.whl")

        assert wheel.name == "idna"
        assert wheel.version == Version("3.6")
        assert wheel.build_tag == ()
        assert wheel.tags == frozenset({Tag("py3", "none", "any")})

    def test_parse_build_tag_and_compressed_tags(self) -> None:
        wheel = WheelFilename.parse("Foo_Bar-1.0-2-py2.py3-none-any.whl")

        assert wheel.name == "foo-bar"
        assert wheel.build_tag == (2, "")
        assert Tag("py2", "none", "any") in wheel.tags
        assert Tag("py3", "none", "any") in wheel.tags

    def test_str_round_trips_canonical_form(self) -> None:
        assert str(WheelFilename.parse("idna-3.6-py3-none-any.whl")) == (
            "idna-3.6-py3-none-any.whl"
        )

    @pytest.mark.parametrize(
        "filename",
        [
            "demo-1.0-py2.py3-none-any.whl",
            "demo-1.0-2-cp312-abi3.cp312-manylinux2014_x86_64.manylinux_2_17_x86_64.whl",
        ],
    )
    def test_str_uses_compressed_tags_and_parses_back(self, filename: str) -> None:
        wheel = WheelFilename.parse(filename)

        rendered = str(wheel)

        assert rendered == filename
        assert WheelFilename.parse(rendered) == wheel


@pytest.mark.unit
class TestSourceDistFilename:
    """Tests for SourceDistFilename parsing."""

    @pytest.mark.parametrize(
        "filename, extension",
        [
            ("idna-3.6.tar.gz", SourceDistExtension.TAR_GZ),
            ("idna-3.6.zip", SourceDistExtension.ZIP),
            ("idna-3.6.tar.bz2", SourceDistExtension.TAR_BZ2),
            ("idna-3.6.tgz", SourceDistExtension.TGZ),
            ("idna-3.6.tar", SourceDistExtension.TAR),
        ],
    )
    def test_extensions(self, filename: str, extension: SourceDistExtension) -> None:
        sdist = SourceDistFilename.parse(filename)

        assert sdist.name == "idna"
        assert sdist.version == Version("3.6")
        assert sdist.extension is extension

    def test_name_with_dashes_splits_at_last_dash(self) -> None:
        sdist = SourceDistFilename.parse("zope.interface-6.0.tar.gz")

        assert sdist.name == "zope-interface"
        assert sdist.version == Version("6.0")

    @pytest.mark.parametrize(
        "filename",
        ["idna.tar.gz", "idna-.tar.gz", "idna-notaversion.tar.gz", "idna-3.6.rar"],
    )
    def test_invalid_raises(self, filename: str) -> None:
        with pytest.raises(ValueError):
            SourceDistFilename.parse(filename)


@pytest.mark.unit
class TestParseDistFilename:
    """Tests for the parse_dist_filename dispatcher."""

    def test_wheel(self) -> None:
        assert isinstance(parse_dist_filename("idna-3.6-py3-none-any.whl"), WheelFilename)

    def test_sdist(self) -> None:
        assert isinstance(parse_dist_filename("idna-3.6.tar.gz"), SourceDistFilename)

    @pytest.mark.parametrize(
        "filename",
        [
            "idna-3.6-py3-none-any.whl.metadata",
            "README.md",
            "broken.whl",
            "demo-1.0-py3-none.whl",
            "idna.tar.gz",
        ],
    )
    def test_not_a_distribution(self, filename: str) -> None:
        assert parse_dist_filename(filename) is None
