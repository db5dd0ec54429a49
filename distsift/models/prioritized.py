"""
Per-version candidate record for distsift.

A :class:`PrioritizedDist` never stores every candidate for a version. It
keeps at most one wheel and one source distribution, each paired with its
verdict, and replaces a kept candidate only when a new verdict strictly
outranks it. Ties keep the first-seen candidate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from packaging.version import Version

from distsift.models.file import File, HashDigest
from distsift.models.filename import SourceDistFilename, WheelFilename
from distsift.models.compatibility import (
    IncompatibleSourceDist,
    IncompatibleWheel,
    SourceDistCompatibility,
    WheelCompatibility,
)


@dataclass(frozen=True)
class RegistryBuiltWheel:
    """A wheel found on a flat index."""

    filename: WheelFilename
    file: File
    index: str

    @property
    def version(self) -> Version:
        return self.filename.version


@dataclass(frozen=True)
class RegistrySourceDist:
    """A source distribution found on a flat index."""

    filename: SourceDistFilename
    file: File
    index: str

    @property
    def version(self) -> Version:
        return self.filename.version


RegistryDist = Union[RegistryBuiltWheel, RegistrySourceDist]


class PrioritizedDist:
    """Best wheel and best source distribution for a single version.

    Example::

        >>> record = PrioritizedDist.from_built(wheel, CompatibleWheel(HashComparison.MATCHED))
        >>> record.insert_source(sdist, CompatibleSourceDist(HashComparison.MATCHED))
        >>> record.best_wheel() is wheel
        True
    """

    __slots__ = ("_wheel", "_source")

    def __init__(self) -> None:
        self._wheel: Optional[Tuple[RegistryBuiltWheel, WheelCompatibility]] = None
        self._source: Optional[Tuple[RegistrySourceDist, SourceDistCompatibility]] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_built(
        cls,
        dist: RegistryBuiltWheel,
        compatibility: WheelCompatibility,
    ) -> PrioritizedDist:
        record = cls()
        record.insert_built(dist, compatibility)
        return record

    @classmethod
    def from_source(
        cls,
        dist: RegistrySourceDist,
        compatibility: SourceDistCompatibility,
    ) -> PrioritizedDist:
        record = cls()
        record.insert_source(dist, compatibility)
        return record

    def copy(self) -> PrioritizedDist:
        """Return an independent record with the same kept candidates."""
        clone = PrioritizedDist()
        clone._wheel = self._wheel
        clone._source = self._source
        return clone

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def insert_built(
        self,
        dist: RegistryBuiltWheel,
        compatibility: WheelCompatibility,
    ) -> bool:
        """Offer a wheel; return True if it became the kept wheel."""
        if self._wheel is None or compatibility.is_more_compatible(self._wheel[1]):
            self._wheel = (dist, compatibility)
            return True
        return False

    def insert_source(
        self,
        dist: RegistrySourceDist,
        compatibility: SourceDistCompatibility,
    ) -> bool:
        """Offer a source distribution; return True if it was kept."""
        if self._source is None or compatibility.is_more_compatible(self._source[1]):
            self._source = (dist, compatibility)
            return True
        return False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def wheel(self) -> Optional[Tuple[RegistryBuiltWheel, WheelCompatibility]]:
        """The kept wheel and its verdict, compatible or not."""
        return self._wheel

    @property
    def source(self) -> Optional[Tuple[RegistrySourceDist, SourceDistCompatibility]]:
        """The kept source distribution and its verdict, compatible or not."""
        return self._source

    def best_wheel(self) -> Optional[RegistryBuiltWheel]:
        """The winning compatible wheel, if any."""
        if self._wheel is not None and self._wheel[1].is_compatible():
            return self._wheel[0]
        return None

    def best_source(self) -> Optional[RegistrySourceDist]:
        """The winning compatible source distribution, if any."""
        if self._source is not None and self._source[1].is_compatible():
            return self._source[0]
        return None

    def get(self) -> Optional[RegistryDist]:
        """The preferred installable dist: the wheel, else the source."""
        return self.best_wheel() or self.best_source()

    def wheel_incompatibility(self) -> Optional[IncompatibleWheel]:
        """Why no wheel is usable, if only incompatible wheels were seen."""
        if self._wheel is not None and isinstance(self._wheel[1], IncompatibleWheel):
            return self._wheel[1]
        return None

    def source_incompatibility(self) -> Optional[IncompatibleSourceDist]:
        """Why no source distribution is usable, if only incompatible ones were seen."""
        if self._source is not None and isinstance(self._source[1], IncompatibleSourceDist):
            return self._source[1]
        return None

    def hashes(self) -> List[HashDigest]:
        """Known digests of the kept candidates."""
        digests: List[HashDigest] = []
        for kept in (self._wheel, self._source):
            if kept is not None:
                digests.extend(kept[0].file.hashes)
        return digests

    def is_empty(self) -> bool:
        """True if no installable candidate exists for this version."""
        return self.get() is None

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrioritizedDist):
            return NotImplemented
        return self._wheel == other._wheel and self._source == other._source

    def __repr__(self) -> str:
        wheel = self._wheel[0].file.filename if self._wheel else None
        source = self._source[0].file.filename if self._source else None
        return f"PrioritizedDist(wheel={wheel!r}, source={source!r})"
