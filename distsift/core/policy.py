"""Policy inputs consumed by the distribution classifier.

Three read-only queries drive classification:

- :class:`Tags` — the tag preference table, "does this wheel satisfy any
  entry, and how preferred is the best one?"
- :class:`HashStrategy` — "which digests are required for this
  package+version, if any?"
- :class:`BuildOptions` — "are source builds / binary installs disabled for
  this package?"

All three are immutable once built and can be shared across threads.

Typical usage::

    from distsift.core.policy import BuildOptions, HashStrategy, Tags

    tags = Tags.from_sys()
    hasher = HashStrategy.from_mapping(
        {"idna==3.6": ["sha256:c05567e9c24a6b9faaa835c4821bad0590fbb9d5779e7caa6e1cc4978e7eb24f"]},
    )
    build_options = BuildOptions.from_lists(no_binary=[":all:"], no_build=["pyyaml"])
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Set, Tuple

from packaging.tags import Tag, parse_tag, sys_tags
from packaging.utils import NormalizedName, canonicalize_name
from packaging.version import InvalidVersion, Version

from distsift.constants import ALL_PACKAGES, NO_PACKAGES
from distsift.models.file import HashDigest
from distsift.models.compatibility import IncompatibleTag, TagCompatibility

__all__ = [
    "BuildOptions",
    "HashMode",
    "HashPolicy",
    "HashStrategy",
    "PackageSelection",
    "Tags",
]


# ---------------------------------------------------------------------------
# Tag preference table
# ---------------------------------------------------------------------------


class Tags:
    """Ordered tag preference table, most preferred first.

    Each tag's priority is ``len(table) - index``, so larger numbers mean
    more preferred and every priority is at least 1. Duplicate tags keep
    their first (most preferred) position.

    Args:
        tags: Tags from most to least preferred.
    """

    __slots__ = ("_ordered", "_priorities", "_interpreters", "_interpreter_abis")

    def __init__(self, tags: Iterable[Tag]) -> None:
        self._ordered: Tuple[Tag, ...] = tuple(dict.fromkeys(tags))
        total = len(self._ordered)
        self._priorities: Dict[Tag, int] = {
            tag: total - position for position, tag in enumerate(self._ordered)
        }
        self._interpreters: FrozenSet[str] = frozenset(
            tag.interpreter for tag in self._ordered
        )
        self._interpreter_abis: FrozenSet[Tuple[str, str]] = frozenset(
            (tag.interpreter, tag.abi) for tag in self._ordered
        )

    @classmethod
    def from_sys(cls) -> Tags:
        """Table for the running interpreter (``packaging.tags.sys_tags``)."""
        return cls(sys_tags())

    @classmethod
    def parse(cls, values: Iterable[str]) -> Tags:
        """Build a table from tag strings such as ``"cp312-cp312-manylinux_2_17_x86_64"``.

        Compressed tag sets (``"py2.py3-none-any"``) expand in a stable
        order at the position where they appear.
        """
        ordered = []
        for value in values:
            ordered.extend(sorted(parse_tag(value), key=str))
        return cls(ordered)

    def priority(self, tag: Tag) -> Optional[int]:
        """Priority of a single tag, or ``None`` if it is not in the table."""
        return self._priorities.get(tag)

    def compatibility(self, wheel_tags: Iterable[Tag]) -> TagCompatibility:
        """Match a wheel's tag set against the table.

        Returns the priority of the most preferred satisfied entry. When
        nothing matches, the verdict names the closest failing component:
        ``PLATFORM`` if some tag has a known interpreter and ABI, else
        ``ABI`` if some tag has a known interpreter, else ``PYTHON``.
        """
        wheel_tags = tuple(wheel_tags)
        best: Optional[int] = None
        for tag in wheel_tags:
            priority = self._priorities.get(tag)
            if priority is not None and (best is None or priority > best):
                best = priority

        if best is not None:
            return TagCompatibility(priority=best)

        if any((tag.interpreter, tag.abi) in self._interpreter_abis for tag in wheel_tags):
            return TagCompatibility(incompatible=IncompatibleTag.PLATFORM)
        if any(tag.interpreter in self._interpreters for tag in wheel_tags):
            return TagCompatibility(incompatible=IncompatibleTag.ABI)
        return TagCompatibility(incompatible=IncompatibleTag.PYTHON)

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._ordered)

    def __contains__(self, tag: object) -> bool:
        return tag in self._priorities

    def __repr__(self) -> str:
        return f"Tags({len(self._ordered)} tags)"


# ---------------------------------------------------------------------------
# Hash policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HashPolicy:
    """Resolved hash requirement for one package version.

    ``required is None`` means no verification; otherwise a file must carry
    at least one of the ``required`` digests.
    """

    required: Optional[FrozenSet[HashDigest]] = None

    @classmethod
    def none(cls) -> HashPolicy:
        return cls(required=None)

    @classmethod
    def validate(cls, digests: Iterable[HashDigest]) -> HashPolicy:
        return cls(required=frozenset(digests))

    def requires_validation(self) -> bool:
        return self.required is not None


class HashMode(str, enum.Enum):
    """How a :class:`HashStrategy` treats packages."""

    #: Never verify hashes.
    NONE = "none"
    #: Verify only packages with known digests.
    VERIFY = "verify"
    #: Verify every package; unknown packages have no acceptable digest.
    REQUIRE = "require"


@dataclass(frozen=True)
class HashStrategy:
    """Per package+version hash requirements.

    Attributes:
        mode: See :class:`HashMode`.
        digests: Required digests keyed by ``(normalized name, version)``.
    """

    mode: HashMode = HashMode.NONE
    digests: Mapping[Tuple[NormalizedName, Version], FrozenSet[HashDigest]] = field(
        default_factory=dict
    )

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Iterable[str]],
        *,
        require: bool = False,
    ) -> HashStrategy:
        """Build a strategy from ``{"name==version": ["sha256:…", ...]}``.

        An empty mapping without ``require`` yields a strategy that never
        verifies.

        Raises:
            ValueError: A key is not ``name==version`` or a digest is
                malformed.
        """
        digests: Dict[Tuple[NormalizedName, Version], Set[HashDigest]] = {}
        for key, values in mapping.items():
            name, version = _parse_pin(key)
            digests.setdefault((name, version), set()).update(
                HashDigest.parse(value) for value in values
            )

        if require:
            mode = HashMode.REQUIRE
        elif digests:
            mode = HashMode.VERIFY
        else:
            mode = HashMode.NONE

        return cls(
            mode=mode,
            digests={key: frozenset(value) for key, value in digests.items()},
        )

    def get_package(self, name: str, version: Version) -> HashPolicy:
        """Resolve the hash policy for one package version."""
        if self.mode is HashMode.NONE:
            return HashPolicy.none()

        required = self.digests.get((canonicalize_name(name), version))
        if required is not None:
            return HashPolicy.validate(required)
        if self.mode is HashMode.REQUIRE:
            return HashPolicy.validate(())
        return HashPolicy.none()


def _parse_pin(value: str) -> Tuple[NormalizedName, Version]:
    name, sep, version = value.partition("==")
    if not sep or not name.strip() or not version.strip():
        raise ValueError(f"Expected 'name==version', got {value!r}")
    try:
        return canonicalize_name(name.strip()), Version(version.strip())
    except InvalidVersion as exc:
        raise ValueError(f"Invalid version in {value!r}") from exc


# ---------------------------------------------------------------------------
# Build-mode policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageSelection:
    """A set of packages, or every package."""

    all: bool = False
    packages: FrozenSet[NormalizedName] = frozenset()

    @classmethod
    def from_list(cls, values: Iterable[str]) -> PackageSelection:
        """Interpret a pip-style list.

        ``":all:"`` selects every package and ``":none:"`` clears the
        selection; both discard names listed before them.
        """
        select_all = False
        packages: Set[NormalizedName] = set()
        for value in values:
            value = value.strip()
            if not value:
                continue
            if value == ALL_PACKAGES:
                select_all = True
                packages.clear()
            elif value == NO_PACKAGES:
                select_all = False
                packages.clear()
            else:
                packages.add(canonicalize_name(value))
        return cls(all=select_all, packages=frozenset(packages))

    def contains(self, name: str) -> bool:
        return self.all or canonicalize_name(name) in self.packages

    def __bool__(self) -> bool:
        return self.all or bool(self.packages)


@dataclass(frozen=True)
class BuildOptions:
    """Per-package build-mode toggles.

    Attributes:
        no_binary: Packages for which wheels must not be used.
        no_build: Packages for which source distributions must not be built.
    """

    no_binary: PackageSelection = field(default_factory=PackageSelection)
    no_build: PackageSelection = field(default_factory=PackageSelection)

    @classmethod
    def from_lists(
        cls,
        *,
        no_binary: Iterable[str] = (),
        no_build: Iterable[str] = (),
    ) -> BuildOptions:
        return cls(
            no_binary=PackageSelection.from_list(no_binary),
            no_build=PackageSelection.from_list(no_build),
        )

    def no_binary_package(self, name: str) -> bool:
        return self.no_binary.contains(name)

    def no_build_package(self, name: str) -> bool:
        return self.no_build.contains(name)
