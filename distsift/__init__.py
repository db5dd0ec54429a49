"""
distsift — distribution selection and static metadata for dependency solvers

distsift turns raw candidate files and raw manifest text into ranked,
policy-filtered data that a dependency solver can trust:

    • Classifies wheels and source distributions against platform tags,
      hash requirements and build-mode policy
    • Keeps the single best wheel and best source distribution per version
    • Indexes find-links style batches by package name and version
    • Extracts the canonical requirement set from ``pyproject.toml``

The core is a pure, synchronous transformation layer: no network I/O, no
filesystem mutation and no build execution.
"""

from __future__ import annotations

from distsift.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "distsift Contributors"
__license__ = "Apache-2.0"
__description__ = "Best-of-kind distribution selection and static requirement extraction."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from distsift.core import (  # noqa: E402
    BuildOptions,
    FlatDistributions,
    FlatIndex,
    HashStrategy,
    Tags,
    parse_pyproject_toml,
)
from distsift.models import (  # noqa: E402
    FlatIndexEntries,
    FlatIndexEntry,
    PrioritizedDist,
    RequiresDist,
    parse_dist_filename,
)

__all__ = [
    "__version__",
    "BuildOptions",
    "FlatDistributions",
    "FlatIndex",
    "FlatIndexEntries",
    "FlatIndexEntry",
    "HashStrategy",
    "PrioritizedDist",
    "RequiresDist",
    "Tags",
    "parse_dist_filename",
    "parse_pyproject_toml",
]
