"""
distsift version information.

The version follows PEP 440, the same scheme distsift ranks distributions
by, so it is parsed with :mod:`packaging` rather than a hand-written regex.
"""

from __future__ import annotations

from packaging.version import Version

# ---------------------------------------------------------------------------
# Main version (single source of truth)
# ---------------------------------------------------------------------------

__version__ = "0.1.0.dev0"

VERSION_INFO = Version(__version__)

#: Logged by the CLI at debug level.
VERSION_STRING = f"distsift {__version__}"
if VERSION_INFO.is_devrelease:
    VERSION_STRING += " (development build)"
