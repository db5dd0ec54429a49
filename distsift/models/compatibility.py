"""
Compatibility verdicts for distributions.

Each discovered file is classified into exactly one verdict:

- wheels: :class:`CompatibleWheel` or :class:`IncompatibleWheel`
- source distributions: :class:`CompatibleSourceDist` or
  :class:`IncompatibleSourceDist`

Verdicts of the same kind are totally preordered by
``is_more_compatible``. A compatible verdict always beats an incompatible
one; among compatible verdicts the hash outcome is compared first, then the
tag priority, then the wheel build tag.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from packaging.utils import BuildTag


class HashComparison(enum.Enum):
    """Outcome of comparing a file's known digests against a hash policy.

    Values are ordered from least to most preferred.
    """

    MISMATCHED = 0
    MISSING = 1
    MATCHED = 2

    def __str__(self) -> str:
        return self.name.lower()


class IncompatibleTag(enum.Enum):
    """The tag component that rules a wheel out for the target environment.

    Values are ordered from furthest to closest to compatible: a wheel
    built for the right interpreter and ABI but the wrong platform is a
    more useful diagnostic than one built for another interpreter.
    """

    PYTHON = 0
    ABI = 1
    PLATFORM = 2

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TagCompatibility:
    """Result of matching a wheel's tags against a tag preference table.

    Exactly one of ``priority`` and ``incompatible`` is set. ``priority``
    is larger for more preferred table entries.
    """

    priority: Optional[int] = None
    incompatible: Optional[IncompatibleTag] = None

    def is_compatible(self) -> bool:
        return self.incompatible is None


# ---------------------------------------------------------------------------
# Wheel verdicts
# ---------------------------------------------------------------------------


class IncompatibleWheelReason(str, enum.Enum):
    """Why a wheel cannot be used."""

    NO_BINARY = "no-binary"
    TAG = "tag"


@dataclass(frozen=True)
class CompatibleWheel:
    """A usable wheel with its ranking data.

    Attributes:
        hash: Hash outcome under the active policy.
        tag_priority: Priority of the most preferred satisfied tag, or
            ``None`` when no tag table was supplied (any tag accepted).
        build_tag: ``()`` or ``(number, suffix)`` from the filename.
    """

    hash: HashComparison
    tag_priority: Optional[int] = None
    build_tag: BuildTag = ()

    def is_compatible(self) -> bool:
        return True

    def _sort_key(self) -> Tuple:
        return (1, self.hash.value, self.tag_priority or 0, self.build_tag)

    def is_more_compatible(self, other: WheelCompatibility) -> bool:
        """Return True if ``self`` strictly outranks ``other``."""
        return self._sort_key() > other._sort_key()

    def __str__(self) -> str:
        return f"compatible (hash {self.hash})"


@dataclass(frozen=True)
class IncompatibleWheel:
    """An unusable wheel, kept only for diagnostics.

    Attributes:
        reason: Why the wheel was excluded.
        tag: Failing tag component when ``reason`` is ``TAG``.
    """

    reason: IncompatibleWheelReason
    tag: Optional[IncompatibleTag] = None

    @classmethod
    def no_binary(cls) -> IncompatibleWheel:
        return cls(IncompatibleWheelReason.NO_BINARY)

    @classmethod
    def tag_mismatch(cls, tag: IncompatibleTag) -> IncompatibleWheel:
        return cls(IncompatibleWheelReason.TAG, tag)

    def is_compatible(self) -> bool:
        return False

    def _sort_key(self) -> Tuple:
        # A tag mismatch says more about the wheel than a blanket no-binary.
        if self.tag is None:
            return (0, -1)
        return (0, self.tag.value)

    def is_more_compatible(self, other: WheelCompatibility) -> bool:
        """Return True if ``self`` strictly outranks ``other``."""
        return self._sort_key() > other._sort_key()

    def __str__(self) -> str:
        if self.reason is IncompatibleWheelReason.NO_BINARY:
            return "binary distributions are disabled for this package"
        return f"no wheel matches the target {self.tag} tag"


WheelCompatibility = Union[CompatibleWheel, IncompatibleWheel]


# ---------------------------------------------------------------------------
# Source distribution verdicts
# ---------------------------------------------------------------------------


class IncompatibleSourceReason(str, enum.Enum):
    """Why a source distribution cannot be used."""

    NO_BUILD = "no-build"


@dataclass(frozen=True)
class CompatibleSourceDist:
    """A usable source distribution; no tag data applies before a build."""

    hash: HashComparison

    def is_compatible(self) -> bool:
        return True

    def _sort_key(self) -> Tuple:
        return (1, self.hash.value)

    def is_more_compatible(self, other: SourceDistCompatibility) -> bool:
        """Return True if ``self`` strictly outranks ``other``."""
        return self._sort_key() > other._sort_key()

    def __str__(self) -> str:
        return f"compatible (hash {self.hash})"


@dataclass(frozen=True)
class IncompatibleSourceDist:
    """An unusable source distribution, kept only for diagnostics."""

    reason: IncompatibleSourceReason = IncompatibleSourceReason.NO_BUILD

    def is_compatible(self) -> bool:
        return False

    def _sort_key(self) -> Tuple:
        return (0,)

    def is_more_compatible(self, other: SourceDistCompatibility) -> bool:
        """Return True if ``self`` strictly outranks ``other``."""
        return self._sort_key() > other._sort_key()

    def __str__(self) -> str:
        return "building from source is disabled for this package"


SourceDistCompatibility = Union[CompatibleSourceDist, IncompatibleSourceDist]
