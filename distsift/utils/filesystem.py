"""
Read-only filesystem helpers for the distsift CLI.

The core never touches the filesystem; these helpers only feed it. Errors
reading a manifest are normalized to ``FileOperationError``. An unreadable
find-links directory is not an error: it becomes an ``offline`` batch so
the rest of the sources can still be indexed.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from distsift.constants import MAX_FILE_SIZE
from distsift.utils.logger import get_logger
from distsift.exceptions import FileOperationError
from distsift.models.file import File, FlatIndexEntries, FlatIndexEntry

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file with an optional size limit.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: The path is missing, not a file, too large, or
            unreadable.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )

    path = path.resolve()
    size = path.stat().st_size
    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def list_find_links(directory: PathLike) -> FlatIndexEntries:
    """List the distributions in a local find-links directory.

    Files whose names do not parse as distributions are skipped. Entries
    are returned sorted by file name so the batch is reproducible.

    Args:
        directory: Directory to list (not recursed into).

    Returns:
        The directory's entries, or an empty ``offline`` batch when the
        directory cannot be listed.
    """
    path = Path(directory)
    index = str(path)

    try:
        children = sorted(path.iterdir(), key=lambda child: child.name)
    except OSError as exc:
        logger.warning("Find-links directory %s is unreachable: %s", path, exc)
        return FlatIndexEntries.offline_source()

    entries: List[FlatIndexEntry] = []
    for child in children:
        if not child.is_file():
            continue
        entry = FlatIndexEntry.from_file(
            File(
                filename=child.name,
                url=child.resolve().as_uri(),
                size=child.stat().st_size,
            ),
            index=index,
        )
        if entry is None:
            logger.debug("Skipping non-distribution file %s", child.name)
            continue
        entries.append(entry)

    logger.debug("Found %d distribution(s) in %s", len(entries), path)
    return FlatIndexEntries(entries=tuple(entries))
