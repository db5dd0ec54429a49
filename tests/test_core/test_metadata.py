"""Unit tests for distsift.core.metadata module.

Test Coverage:
- Base and optional dependencies in declared order
- ``extra == "<group>"`` markers, including combination with existing markers
- Dynamic field handling (version allowed, dependencies rejected)
- Legacy ``[tool.poetry]`` guard
- Missing and malformed fields
"""

from __future__ import annotations

import textwrap

import pytest
from packaging.markers import Marker

from distsift.core.metadata import parse_pyproject_toml
from distsift.exceptions import (
    ConfigParseError,
    DynamicFieldError,
    LegacyToolSyntaxError,
    MetadataError,
    MissingFieldError,
)


def _parse(text: str):
    return parse_pyproject_toml(textwrap.dedent(text))


@pytest.mark.unit
class TestParsePyprojectToml:
    """Tests for successful extraction."""

    def test_base_dependencies(self) -> None:
        requires = _parse(
            """
            [project]
            name = "Demo_Project"
            version = "1.0"
            dependencies = ["idna>=3", "click"]
            """
        )

        assert requires.name == "demo-project"
        assert [str(r) for r in requires.requires_dist] == ["idna>=3", "click"]
        assert requires.provides_extras == ()
        assert requires.dynamic is False

    def test_extras_get_marker(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"
            dependencies = ["idna"]

            [project.optional-dependencies]
            test = ["pytest>=7"]
            """
        )

        assert "test" in requires.provides_extras
        extra_requirement = requires.requires_dist[1]
        assert extra_requirement.name == "pytest"
        assert extra_requirement.marker == Marker('extra == "test"')
        assert extra_requirement.marker.evaluate({"extra": "test"})
        assert not extra_requirement.marker.evaluate({"extra": "docs"})

    def test_existing_marker_is_combined(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"

            [project.optional-dependencies]
            win = ["pywin32; sys_platform == 'win32' or sys_platform == 'cygwin'"]
            """
        )

        marker = requires.requires_dist[0].marker
        assert marker.evaluate({"extra": "win", "sys_platform": "win32"})
        assert not marker.evaluate({"extra": "win", "sys_platform": "linux"})
        assert not marker.evaluate({"extra": "other", "sys_platform": "cygwin"})

    def test_order_is_base_then_groups_in_declared_order(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"
            dependencies = ["a", "b"]

            [project.optional-dependencies]
            zeta = ["c"]
            Alpha_Group = ["d", "e"]
            """
        )

        assert [r.name for r in requires.requires_dist] == ["a", "b", "c", "d", "e"]
        assert requires.provides_extras == ("zeta", "alpha-group")
        assert requires.requires_dist[3].marker == Marker('extra == "alpha-group"')

    def test_groups_with_same_normalized_name_merge(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"

            [project.optional-dependencies]
            Test = ["x"]
            docs = ["sphinx"]
            test = ["y"]
            """
        )

        assert requires.provides_extras == ("test", "docs")
        assert [r.name for r in requires.requires_dist] == ["x", "sphinx", "y"]
        assert requires.requires_dist[0].marker == Marker('extra == "test"')
        assert requires.requires_dist[2].marker == Marker('extra == "test"')

    def test_dynamic_version_is_allowed(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"
            dynamic = ["version", "readme"]
            dependencies = ["idna"]
            """
        )

        assert requires.dynamic is True
        assert len(requires) == 1

    def test_no_dependencies_at_all(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"
            """
        )

        assert requires.requires_dist == ()

    def test_legacy_table_with_literal_dependencies_is_fine(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"
            dependencies = []

            [tool.poetry]
            name = "demo"
            """
        )

        assert requires.requires_dist == ()

    def test_lenient_repair_is_applied(self) -> None:
        requires = _parse(
            """
            [project]
            name = "demo"
            dependencies = ["numpy >=1.19 <2.0"]
            """
        )

        assert str(requires.requires_dist[0].specifier) == "<2.0,>=1.19"


@pytest.mark.unit
class TestParsePyprojectTomlErrors:
    """Tests for the failure modes."""

    def test_dynamic_dependencies_wins_over_literal_list(self) -> None:
        with pytest.raises(DynamicFieldError) as exc_info:
            _parse(
                """
                [project]
                name = "demo"
                dynamic = ["dependencies"]
                dependencies = ["idna"]
                """
            )

        assert exc_info.value.field == "dependencies"

    def test_dynamic_optional_dependencies(self) -> None:
        with pytest.raises(DynamicFieldError):
            _parse(
                """
                [project]
                name = "demo"
                dynamic = ["optional-dependencies"]
                """
            )

    def test_legacy_poetry_without_dependencies(self) -> None:
        with pytest.raises(LegacyToolSyntaxError) as exc_info:
            _parse(
                """
                [project]
                name = "demo"

                [tool.poetry.dependencies]
                python = "^3.8"
                """
            )

        assert exc_info.value.tool == "poetry"

    def test_missing_project(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            _parse(
                """
                [tool.black]
                line-length = 88
                """
            )

        assert exc_info.value.field == "project"

    def test_missing_name(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            _parse(
                """
                [project]
                dependencies = ["idna"]
                """
            )

        assert exc_info.value.field == "project.name"

    def test_invalid_toml(self) -> None:
        with pytest.raises(ConfigParseError):
            parse_pyproject_toml("[project\nname = ")

    @pytest.mark.parametrize(
        "body, field",
        [
            ('name = 3', "project.name"),
            ('name = "demo"\ndependencies = "idna"', "project.dependencies"),
            ('name = "demo"\ndynamic = "version"', "project.dynamic"),
            ('name = "demo"\noptional-dependencies = ["x"]', "project.optional-dependencies"),
        ],
    )
    def test_wrongly_typed_fields(self, body: str, field: str) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            parse_pyproject_toml(f"[project]\n{body}\n")

        assert exc_info.value.field == field

    def test_wrongly_typed_extra_group(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            _parse(
                """
                [project]
                name = "demo"

                [project.optional-dependencies]
                test = "pytest"
                """
            )

        assert exc_info.value.field == "project.optional-dependencies.test"

    def test_invalid_requirement(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            _parse(
                """
                [project]
                name = "demo"
                dependencies = ["not a requirement !!"]
                """
            )

        assert exc_info.value.field == "project.dependencies"
        assert exc_info.value.content == "not a requirement !!"

    def test_all_errors_are_metadata_errors(self) -> None:
        for error in (ConfigParseError, MissingFieldError, DynamicFieldError, LegacyToolSyntaxError):
            assert issubclass(error, MetadataError)
