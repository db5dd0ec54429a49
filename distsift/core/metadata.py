"""Static requirement extraction from ``pyproject.toml`` (PEP 621).

:func:`parse_pyproject_toml` reads the ``[project]`` table and returns the
canonical :class:`~distsift.models.requires_dist.RequiresDist`. It refuses
to guess: whenever the manifest cannot be trusted to describe the
project's dependencies, it raises a :class:`~distsift.exceptions.MetadataError`
subclass so the caller can fall back to another metadata source (usually
building the project).

Failure modes:

- :class:`~distsift.exceptions.ConfigParseError` — invalid TOML, wrongly
  typed fields, or requirement strings that stay invalid after lenient
  repair
- :class:`~distsift.exceptions.MissingFieldError` — no ``[project]`` table
  or no ``project.name``
- :class:`~distsift.exceptions.DynamicFieldError` — ``dependencies`` or
  ``optional-dependencies`` listed in ``project.dynamic``
- :class:`~distsift.exceptions.LegacyToolSyntaxError` — no
  ``project.dependencies`` but a legacy ``[tool.poetry]`` table

Typical usage::

    from distsift.core.metadata import parse_pyproject_toml
    from distsift.exceptions import MetadataError

    try:
        requires = parse_pyproject_toml(Path("pyproject.toml").read_text())
    except MetadataError:
        requires = build_and_read_metadata()
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import tomli as tomllib
from packaging.markers import Marker
from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import NormalizedName, canonicalize_name

from distsift.utils.logger import get_logger
from distsift.core.lenient import parse_requirement_lenient
from distsift.models.requires_dist import RequiresDist
from distsift.constants import LEGACY_DEPENDENCY_TOOLS, UNSUPPORTED_DYNAMIC_FIELDS
from distsift.exceptions import (
    ConfigParseError,
    DynamicFieldError,
    LegacyToolSyntaxError,
    MissingFieldError,
)

logger = get_logger("metadata")

__all__ = ["parse_pyproject_toml"]


def parse_pyproject_toml(contents: str) -> RequiresDist:
    """Extract the canonical requirement set from ``pyproject.toml`` text.

    Base ``dependencies`` come first, followed by every
    ``optional-dependencies`` group in declared order; each extras-derived
    requirement gets an ``extra == "<group>"`` marker.

    Args:
        contents: Raw ``pyproject.toml`` text.

    Returns:
        The project's :class:`RequiresDist`.

    Raises:
        MetadataError: One of the subclasses listed in the module
            docstring.

    Example::

        >>> requires = parse_pyproject_toml('''
        ... [project]
        ... name = "demo"
        ... dependencies = ["idna>=3"]
        ... [project.optional-dependencies]
        ... test = ["pytest"]
        ... ''')
        >>> [str(r) for r in requires.requires_dist]
        ['idna>=3', 'pytest; extra == "test"']
        >>> requires.provides_extras
        ('test',)
    """
    try:
        pyproject = tomllib.loads(contents)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigParseError(f"Invalid TOML in pyproject.toml: {exc}") from exc

    project = pyproject.get("project")
    if project is None:
        raise MissingFieldError("project")
    if not isinstance(project, dict):
        raise ConfigParseError("[project] must be a table", field="project")

    name = project.get("name")
    if name is None:
        raise MissingFieldError("project.name")
    if not isinstance(name, str):
        raise ConfigParseError("project.name must be a string", field="project.name")

    # A dynamic dependency list wins over any literal one next to it.
    dynamic = False
    for field in _string_list(project, "dynamic"):
        if field in UNSUPPORTED_DYNAMIC_FIELDS:
            raise DynamicFieldError(field)
        if field == "version":
            dynamic = True

    if "dependencies" not in project:
        tool = pyproject.get("tool")
        if isinstance(tool, dict):
            for legacy in LEGACY_DEPENDENCY_TOOLS:
                if legacy in tool:
                    raise LegacyToolSyntaxError(legacy)

    requires_dist: List[Requirement] = [
        _parse_requirement(text, field="project.dependencies")
        for text in _string_list(project, "dependencies")
    ]

    # Keys that normalize to the same group merge under its first position.
    provides_extras: List[NormalizedName] = []
    for extra, requirements in _optional_dependencies(project).items():
        extra_name = canonicalize_name(extra)
        if extra_name not in provides_extras:
            provides_extras.append(extra_name)
        for text in requirements:
            requirement = _parse_requirement(
                text, field=f"project.optional-dependencies.{extra}"
            )
            requires_dist.append(_with_extra_marker(requirement, extra_name))

    logger.debug(
        "Extracted %d requirement(s) and %d extra(s) for %s",
        len(requires_dist),
        len(provides_extras),
        name,
    )

    return RequiresDist(
        name=canonicalize_name(name),
        requires_dist=tuple(requires_dist),
        provides_extras=tuple(provides_extras),
        dynamic=dynamic,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _string_list(
    table: Mapping[str, Any],
    key: str,
    *,
    prefix: str = "project",
) -> List[str]:
    """Return ``table[key]`` as a list of strings (``[]`` when absent)."""
    value = table.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigParseError(
            f"{prefix}.{key} must be an array of strings",
            field=f"{prefix}.{key}",
            content=repr(value),
        )
    return value


def _optional_dependencies(project: Mapping[str, Any]) -> Dict[str, List[str]]:
    """Return ``project.optional-dependencies`` preserving declared order."""
    value = project.get("optional-dependencies")
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigParseError(
            "project.optional-dependencies must be a table",
            field="project.optional-dependencies",
        )
    return {
        extra: _string_list(value, extra, prefix="project.optional-dependencies")
        for extra in value
    }


def _parse_requirement(text: str, *, field: str) -> Requirement:
    try:
        return parse_requirement_lenient(text)
    except InvalidRequirement as exc:
        raise ConfigParseError(
            f"Invalid requirement in {field}: {exc}",
            field=field,
            content=text,
        ) from exc


def _with_extra_marker(requirement: Requirement, extra: NormalizedName) -> Requirement:
    """Restrict ``requirement`` to the optional-dependency group ``extra``."""
    marker = f'extra == "{extra}"'
    if requirement.marker is not None:
        marker = f"({requirement.marker}) and {marker}"
    requirement.marker = Marker(marker)
    return requirement
