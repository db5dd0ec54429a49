"""Distribution compatibility classifier.

Turns one discovered file into a compatibility verdict. Classification is
total: every input yields a verdict and nothing here raises.

Wheels are checked in this order:

1. build-mode ``no_binary`` for the package → :class:`IncompatibleWheel`
2. tag table (when supplied) → most preferred satisfied entry, or
   :class:`IncompatibleWheel` naming the failing tag component
3. hash policy → :class:`HashComparison`

Source distributions only go through build-mode ``no_build`` and the hash
check; they carry no platform information before a build.
"""

from __future__ import annotations

from typing import Optional, Sequence

from distsift.models.file import HashDigest
from distsift.models.filename import SourceDistFilename, WheelFilename
from distsift.core.policy import BuildOptions, HashPolicy, HashStrategy, Tags
from distsift.models.compatibility import (
    CompatibleSourceDist,
    CompatibleWheel,
    HashComparison,
    IncompatibleSourceDist,
    IncompatibleWheel,
    SourceDistCompatibility,
    WheelCompatibility,
)

__all__ = [
    "hash_comparison",
    "source_dist_compatibility",
    "wheel_compatibility",
]


def hash_comparison(hashes: Sequence[HashDigest], policy: HashPolicy) -> HashComparison:
    """Compare a file's known digests against a resolved hash policy.

    Args:
        hashes: Digests known for the file (possibly empty).
        policy: Policy for the file's package version.

    Returns:
        ``MATCHED`` when no verification is required or any known digest
        is required; ``MISSING`` when verification is required but the
        file has no known digests; ``MISMATCHED`` otherwise.
    """
    if policy.required is None:
        return HashComparison.MATCHED
    if not hashes:
        return HashComparison.MISSING
    if any(digest in policy.required for digest in hashes):
        return HashComparison.MATCHED
    return HashComparison.MISMATCHED


def wheel_compatibility(
    filename: WheelFilename,
    hashes: Sequence[HashDigest],
    tags: Optional[Tags],
    hasher: HashStrategy,
    build_options: BuildOptions,
) -> WheelCompatibility:
    """Classify a wheel.

    Args:
        filename: Parsed wheel filename.
        hashes: Digests known for the file.
        tags: Tag preference table, or ``None`` to accept any tag unranked.
        hasher: Hash requirements.
        build_options: Build-mode toggles.

    Returns:
        :class:`CompatibleWheel` with hash outcome, tag priority and build
        tag, or :class:`IncompatibleWheel`.

    Example::

        >>> wheel = WheelFilename.parse("idna-3.6-py3-none-any.whl")
        >>> wheel_compatibility(wheel, [], None, HashStrategy(), BuildOptions())
        CompatibleWheel(hash=<HashComparison.MATCHED: 2>, tag_priority=None, build_tag=())
    """
    if build_options.no_binary_package(filename.name):
        return IncompatibleWheel.no_binary()

    priority: Optional[int] = None
    if tags is not None:
        tag_compatibility = filename.compatibility(tags)
        if tag_compatibility.incompatible is not None:
            return IncompatibleWheel.tag_mismatch(tag_compatibility.incompatible)
        priority = tag_compatibility.priority

    hash_outcome = hash_comparison(
        hashes, hasher.get_package(filename.name, filename.version)
    )

    return CompatibleWheel(
        hash=hash_outcome,
        tag_priority=priority,
        build_tag=filename.build_tag,
    )


def source_dist_compatibility(
    filename: SourceDistFilename,
    hashes: Sequence[HashDigest],
    hasher: HashStrategy,
    build_options: BuildOptions,
) -> SourceDistCompatibility:
    """Classify a source distribution.

    Returns:
        :class:`CompatibleSourceDist` with the hash outcome, or
        :class:`IncompatibleSourceDist` when builds are disabled.
    """
    if build_options.no_build_package(filename.name):
        return IncompatibleSourceDist()

    return CompatibleSourceDist(
        hash=hash_comparison(hashes, hasher.get_package(filename.name, filename.version))
    )
