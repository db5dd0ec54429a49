"""
Unified data model exports for distsift.

This module re-exports the value types shared by the classifier, the flat
index and the metadata extractor, so callers can import them directly from
``distsift.models`` instead of individual submodules.

Example:
    >>> from distsift.models import FlatIndexEntry, PrioritizedDist, RequiresDist
"""

from __future__ import annotations

from distsift.models.compatibility import (
    CompatibleSourceDist,
    CompatibleWheel,
    HashComparison,
    IncompatibleSourceDist,
    IncompatibleSourceReason,
    IncompatibleTag,
    IncompatibleWheel,
    IncompatibleWheelReason,
    SourceDistCompatibility,
    TagCompatibility,
    WheelCompatibility,
)
from distsift.models.filename import (
    DistFilename,
    SourceDistExtension,
    SourceDistFilename,
    WheelFilename,
    parse_dist_filename,
)
from distsift.models.file import File, FlatIndexEntries, FlatIndexEntry, HashDigest
from distsift.models.prioritized import (
    PrioritizedDist,
    RegistryBuiltWheel,
    RegistryDist,
    RegistrySourceDist,
)
from distsift.models.requires_dist import RequiresDist

__all__ = [
    # Verdicts
    "CompatibleSourceDist",
    "CompatibleWheel",
    "HashComparison",
    "IncompatibleSourceDist",
    "IncompatibleSourceReason",
    "IncompatibleTag",
    "IncompatibleWheel",
    "IncompatibleWheelReason",
    "SourceDistCompatibility",
    "TagCompatibility",
    "WheelCompatibility",
    # Filenames
    "DistFilename",
    "SourceDistExtension",
    "SourceDistFilename",
    "WheelFilename",
    "parse_dist_filename",
    # Files
    "File",
    "FlatIndexEntries",
    "FlatIndexEntry",
    "HashDigest",
    # Records
    "PrioritizedDist",
    "RegistryBuiltWheel",
    "RegistryDist",
    "RegistrySourceDist",
    "RequiresDist",
]
