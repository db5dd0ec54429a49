"""
Distribution filename models for distsift.

A distribution filename is a closed sum type:

- :class:`WheelFilename` — ``{name}-{version}(-{build})?-{python}-{abi}-{platform}.whl``
- :class:`SourceDistFilename` — ``{name}-{version}{extension}``

:func:`parse_dist_filename` returns the matching variant, or ``None`` for
files that are not installable distributions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Optional, Union

from packaging.tags import Tag
from packaging.utils import (
    BuildTag,
    InvalidWheelFilename,
    NormalizedName,
    canonicalize_name,
    parse_wheel_filename,
)
from packaging.version import InvalidVersion, Version

from distsift.constants import WHEEL_EXTENSION
from distsift.utils.logger import get_logger
from distsift.models.compatibility import TagCompatibility

if TYPE_CHECKING:
    from distsift.core.policy import Tags

logger = get_logger("filename")


class SourceDistExtension(str, enum.Enum):
    """Archive extensions recognised for source distributions."""

    TAR_GZ = ".tar.gz"
    TAR_BZ2 = ".tar.bz2"
    TAR_XZ = ".tar.xz"
    TAR_ZST = ".tar.zst"
    TAR_LZ = ".tar.lz"
    TAR_LZMA = ".tar.lzma"
    TGZ = ".tgz"
    TBZ = ".tbz"
    TXZ = ".txz"
    TLZ = ".tlz"
    TAR = ".tar"
    ZIP = ".zip"

    @classmethod
    def from_filename(cls, filename: str) -> Optional[SourceDistExtension]:
        """Return the extension ``filename`` ends with, if any."""
        lowered = filename.lower()
        # Longest first so ".tar.gz" wins over ".tar"-like suffixes.
        for extension in sorted(cls, key=lambda ext: len(ext.value), reverse=True):
            if lowered.endswith(extension.value):
                return extension
        return None


@dataclass(frozen=True)
class WheelFilename:
    """A parsed wheel filename.

    Attributes:
        name: Normalized package name.
        version: Parsed version.
        build_tag: ``()`` or ``(number, suffix)``; only used to break ties.
        tags: Every (interpreter, ABI, platform) triple the wheel supports.
    """

    name: NormalizedName
    version: Version
    build_tag: BuildTag
    tags: FrozenSet[Tag]

    @classmethod
    def parse(cls, filename: str) -> WheelFilename:
        """Parse a wheel filename.

        Raises:
            packaging.utils.InvalidWheelFilename: ``filename`` is not a
                valid wheel name.
        """
        name, version, build_tag, tags = parse_wheel_filename(filename)
        return cls(name=name, version=version, build_tag=build_tag, tags=tags)

    def compatibility(self, tags: Tags) -> TagCompatibility:
        """Match this wheel's tags against a preference table."""
        return tags.compatibility(self.tags)

    def __str__(self) -> str:
        """Render the compressed ``{pythons}-{abis}-{platforms}`` tag form.

        Example::

            >>> str(WheelFilename.parse("Foo-1.0-py2.py3-none-any.whl"))
            'foo-1.0-py2.py3-none-any.whl'
        """
        build = f"-{self.build_tag[0]}{self.build_tag[1]}" if self.build_tag else ""
        compressed = "-".join(
            ".".join(sorted({getattr(tag, part) for tag in self.tags}))
            for part in ("interpreter", "abi", "platform")
        )
        return f"{self.name}-{self.version}{build}-{compressed}{WHEEL_EXTENSION}"


@dataclass(frozen=True)
class SourceDistFilename:
    """A parsed source distribution filename.

    Source distributions carry no platform information.
    """

    name: NormalizedName
    version: Version
    extension: SourceDistExtension

    @classmethod
    def parse(cls, filename: str) -> SourceDistFilename:
        """Parse a source distribution filename.

        The name/version split happens at the last ``-`` of the stem, which
        matches how build backends name sdists.

        Raises:
            ValueError: Unknown extension, missing version, or an invalid
                version.
        """
        extension = SourceDistExtension.from_filename(filename)
        if extension is None:
            raise ValueError(f"Unsupported source distribution extension: {filename}")

        stem = filename[: -len(extension.value)]
        name_part, sep, version_part = stem.rpartition("-")
        if not sep or not name_part or not version_part:
            raise ValueError(f"Missing version in source distribution: {filename}")

        try:
            version = Version(version_part)
        except InvalidVersion as exc:
            raise ValueError(
                f"Invalid version {version_part!r} in source distribution: {filename}"
            ) from exc

        return cls(
            name=canonicalize_name(name_part),
            version=version,
            extension=extension,
        )

    def __str__(self) -> str:
        return f"{self.name}-{self.version}{self.extension.value}"


DistFilename = Union[WheelFilename, SourceDistFilename]


def parse_dist_filename(filename: str) -> Optional[DistFilename]:
    """Parse a wheel or source distribution filename.

    Args:
        filename: Bare file name (no directory or URL components).

    Returns:
        The parsed filename, or ``None`` if ``filename`` is not a
        distribution (or is malformed).

    Example::

        >>> parse_dist_filename("idna-3.6-py3-none-any.whl").version
        <Version('3.6')>
        >>> parse_dist_filename("idna-3.6.tar.gz").extension
        <SourceDistExtension.TAR_GZ: '.tar.gz'>
        >>> parse_dist_filename("idna-3.6.whl.metadata") is None
        True
    """
    if filename.lower().endswith(WHEEL_EXTENSION):
        try:
            return WheelFilename.parse(filename)
        except (InvalidWheelFilename, InvalidVersion) as exc:
            logger.debug("Ignoring invalid wheel filename %s: %s", filename, exc)
            return None

    if SourceDistExtension.from_filename(filename) is not None:
        try:
            return SourceDistFilename.parse(filename)
        except ValueError as exc:
            logger.debug("Ignoring invalid source distribution %s: %s", filename, exc)
            return None

    return None
