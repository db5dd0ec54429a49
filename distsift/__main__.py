"""
Executable module for distsift.

Running:
    python -m distsift

is equivalent to:
    distsift
"""

from __future__ import annotations

import sys


def main() -> int:
    """Run the CLI and return its exit code."""
    # Imported lazily so ``python -m distsift`` reports missing CLI
    # dependencies instead of failing with a traceback.
    try:
        from distsift.cli import main as cli_main
    except ImportError as exc:
        sys.stderr.write(f"distsift CLI is unavailable: {exc}\n")
        sys.stderr.write(f"Python version: {sys.version}\n")
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
