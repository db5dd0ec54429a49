"""
Centralized constants for distsift.

This module defines immutable configuration values used across distsift,
including distribution file extensions, policy sentinels, manifest field
names, and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Distribution filenames
# ---------------------------------------------------------------------------

#: Extension of a built distribution.
WHEEL_EXTENSION: Final[str] = ".whl"

#: Hash algorithms accepted in ``#<algorithm>=<digest>`` URL fragments.
HASH_ALGORITHMS: Final[Sequence[str]] = ("md5", "sha256", "sha384", "sha512")

# ---------------------------------------------------------------------------
# Build-mode policy sentinels (pip-compatible spelling)
# ---------------------------------------------------------------------------

#: Selects every package in ``no_binary`` / ``no_build`` lists.
ALL_PACKAGES: Final[str] = ":all:"

#: Clears any previous selection in ``no_binary`` / ``no_build`` lists.
NO_PACKAGES: Final[str] = ":none:"

# ---------------------------------------------------------------------------
# pyproject.toml fields
# ---------------------------------------------------------------------------

#: ``project.dynamic`` entries that make static extraction impossible.
UNSUPPORTED_DYNAMIC_FIELDS: Final[Sequence[str]] = (
    "dependencies",
    "optional-dependencies",
)

#: ``[tool.*]`` tables that declare dependencies in a non-standard format.
LEGACY_DEPENDENCY_TOOLS: Final[Sequence[str]] = ("poetry",)

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Validate hashes for every package, not only those with known digests.
DEFAULT_REQUIRE_HASHES: Final[bool] = False

#: Rank wheels against the running interpreter's tags.
DEFAULT_MATCH_PLATFORM_TAGS: Final[bool] = True

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
