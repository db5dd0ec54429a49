"""
Core functionality exports for distsift.

This module provides convenient access to the core subsystems of distsift.
Importing from here keeps user-facing imports clean and stable:

    from distsift.core import FlatIndex, parse_pyproject_toml

The two subsystems share no state: the flat index classifies and ranks
discovered files, while the metadata extractor reads requirements from a
manifest.
"""

from __future__ import annotations

from distsift.core.policy import (
    BuildOptions,
    HashMode,
    HashPolicy,
    HashStrategy,
    PackageSelection,
    Tags,
)
from distsift.core.classifier import (
    hash_comparison,
    source_dist_compatibility,
    wheel_compatibility,
)
from distsift.core.flat_index import FlatDistributions, FlatIndex
from distsift.core.lenient import parse_requirement_lenient
from distsift.core.metadata import parse_pyproject_toml

__all__ = [
    # Policies
    "BuildOptions",
    "HashMode",
    "HashPolicy",
    "HashStrategy",
    "PackageSelection",
    "Tags",
    # Classification
    "hash_comparison",
    "source_dist_compatibility",
    "wheel_compatibility",
    # Indexes
    "FlatDistributions",
    "FlatIndex",
    # Metadata
    "parse_pyproject_toml",
    "parse_requirement_lenient",
]
