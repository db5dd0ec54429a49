"""Flat (find-links style) distribution index for distsift.

Two levels of index are built from an already-fetched batch of entries:

1. :class:`FlatDistributions` — for one package, version →
   :class:`~distsift.models.prioritized.PrioritizedDist`, iterated in
   ascending version order.
2. :class:`FlatIndex` — package name → :class:`FlatDistributions`, plus
   the aggregate ``offline`` flag of the contributing sources.

Every file is classified (see :mod:`distsift.core.classifier`) and merged
into its version's record, which keeps only the best wheel and the best
source distribution. Because a record replaces its candidate only on a
strictly better verdict, the retained verdicts do not depend on insertion
order.

Typical usage::

    from distsift.core import BuildOptions, FlatIndex, HashStrategy, Tags
    from distsift.models import File, FlatIndexEntries, FlatIndexEntry

    entries = FlatIndexEntries(
        entries=tuple(
            FlatIndexEntry.from_file(File(name), index="./wheelhouse")
            for name in ["idna-3.6-py3-none-any.whl", "idna-3.6.tar.gz"]
        ),
    )
    index = FlatIndex.from_entries(entries, Tags.from_sys(), HashStrategy(), BuildOptions())

    for version, record in index.get("idna").items():
        print(version, record.get())
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from packaging.utils import NormalizedName, canonicalize_name
from packaging.version import Version

from distsift.utils.logger import get_logger
from distsift.core.policy import BuildOptions, HashStrategy, Tags
from distsift.core.classifier import source_dist_compatibility, wheel_compatibility
from distsift.models.file import File, FlatIndexEntries, FlatIndexEntry
from distsift.models.filename import DistFilename, SourceDistFilename, WheelFilename
from distsift.models.prioritized import (
    PrioritizedDist,
    RegistryBuiltWheel,
    RegistrySourceDist,
)

logger = get_logger("flat_index")

# Public API
__all__ = ["FlatDistributions", "FlatIndex"]


# ---------------------------------------------------------------------------
# Per-package index
# ---------------------------------------------------------------------------


class FlatDistributions:
    """Version-ordered best-of-kind records for a single package.

    Args:
        distributions: Optional initial version → record mapping.
    """

    __slots__ = ("_distributions",)

    def __init__(
        self,
        distributions: Optional[Mapping[Version, PrioritizedDist]] = None,
    ) -> None:
        self._distributions: Dict[Version, PrioritizedDist] = dict(distributions or {})

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[FlatIndexEntry],
        tags: Optional[Tags],
        hasher: HashStrategy,
        build_options: BuildOptions,
    ) -> FlatDistributions:
        """Collect a single package's entries, in arrival order."""
        distributions = cls()
        for entry in entries:
            distributions.add_file(
                entry.file,
                entry.filename,
                tags,
                hasher,
                build_options,
                entry.index,
            )
        return distributions

    # ------------------------------------------------------------------
    # Mutation (construction time only)
    # ------------------------------------------------------------------

    def add_file(
        self,
        file: File,
        filename: DistFilename,
        tags: Optional[Tags],
        hasher: HashStrategy,
        build_options: BuildOptions,
        index: str,
    ) -> None:
        """Classify ``file`` and merge it into its version's record.

        No ``requires-python`` check happens here: source distributions do
        not expose it, and a wheel's value is only read once selected.

        Raises:
            TypeError: ``filename`` is neither a wheel nor a source
                distribution filename.
        """
        if isinstance(filename, WheelFilename):
            compatibility = wheel_compatibility(
                filename, file.hashes, tags, hasher, build_options
            )
            dist = RegistryBuiltWheel(filename=filename, file=file, index=index)
            record = self._distributions.get(filename.version)
            if record is None:
                self._distributions[filename.version] = PrioritizedDist.from_built(
                    dist, compatibility
                )
                kept = True
            else:
                kept = record.insert_built(dist, compatibility)
        elif isinstance(filename, SourceDistFilename):
            compatibility = source_dist_compatibility(
                filename, file.hashes, hasher, build_options
            )
            dist = RegistrySourceDist(filename=filename, file=file, index=index)
            record = self._distributions.get(filename.version)
            if record is None:
                self._distributions[filename.version] = PrioritizedDist.from_source(
                    dist, compatibility
                )
                kept = True
            else:
                kept = record.insert_source(dist, compatibility)
        else:
            raise TypeError(f"Unsupported distribution filename: {filename!r}")

        logger.debug(
            "%s from %s: %s (%s)",
            file.filename,
            index,
            compatibility,
            "kept" if kept else "outranked",
        )

    def remove(self, version: Version) -> Optional[PrioritizedDist]:
        """Drop a version's record; return it, or ``None`` if absent."""
        return self._distributions.pop(version, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, version: Version) -> Optional[PrioritizedDist]:
        return self._distributions.get(version)

    def versions(self) -> List[Version]:
        """All versions, ascending."""
        return sorted(self._distributions)

    def items(self) -> Iterator[Tuple[Version, PrioritizedDist]]:
        """``(version, record)`` pairs, ascending by version."""
        for version in self.versions():
            yield version, self._distributions[version]

    def copy(self) -> FlatDistributions:
        """Independent copy, for callers that remove versions during a solve."""
        return FlatDistributions(
            {version: record.copy() for version, record in self._distributions.items()}
        )

    def __iter__(self) -> Iterator[Version]:
        return iter(self.versions())

    def __len__(self) -> int:
        return len(self._distributions)

    def __contains__(self, version: object) -> bool:
        return version in self._distributions

    def __repr__(self) -> str:
        return f"FlatDistributions({', '.join(str(v) for v in self.versions())})"


# ---------------------------------------------------------------------------
# Top-level index
# ---------------------------------------------------------------------------


class FlatIndex:
    """Package name → :class:`FlatDistributions`, built once from a batch.

    The name mapping is read-only after construction; rebuild the index
    when the set of sources changes.

    Args:
        index: Package name → distributions mapping.
        offline: True if any contributing source was unreachable.
    """

    __slots__ = ("_index", "_offline")

    def __init__(
        self,
        index: Optional[Mapping[NormalizedName, FlatDistributions]] = None,
        offline: bool = False,
    ) -> None:
        self._index: Mapping[NormalizedName, FlatDistributions] = MappingProxyType(
            dict(index or {})
        )
        self._offline = offline

    @classmethod
    def from_entries(
        cls,
        entries: FlatIndexEntries,
        tags: Optional[Tags],
        hasher: HashStrategy,
        build_options: BuildOptions,
    ) -> FlatIndex:
        """Group entries by package name and merge each group in arrival order.

        Names come from the parsed filenames as-is; normalizing names
        across entries is the discovery layer's job.
        """
        index: Dict[NormalizedName, FlatDistributions] = {}
        for entry in entries.entries:
            distributions = index.setdefault(entry.filename.name, FlatDistributions())
            distributions.add_file(
                entry.file,
                entry.filename,
                tags,
                hasher,
                build_options,
                entry.index,
            )

        logger.debug(
            "Indexed %d file(s) across %d package(s)%s",
            len(entries.entries),
            len(index),
            " (some sources offline)" if entries.offline else "",
        )
        return cls(index, offline=entries.offline)

    def get(self, package_name: str) -> Optional[FlatDistributions]:
        """Distributions for ``package_name``, or ``None`` if never observed."""
        return self._index.get(canonicalize_name(package_name))

    @property
    def offline(self) -> bool:
        """True if any contributing source could not be reached."""
        return self._offline

    def package_names(self) -> List[NormalizedName]:
        """Observed package names, sorted."""
        return sorted(self._index)

    def __iter__(self) -> Iterator[NormalizedName]:
        return iter(self.package_names())

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, package_name: object) -> bool:
        if not isinstance(package_name, str):
            return False
        return canonicalize_name(package_name) in self._index

    def __repr__(self) -> str:
        return f"FlatIndex(packages={len(self._index)}, offline={self._offline})"
