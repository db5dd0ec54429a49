"""
File and index entry models for distsift.

These are the inputs handed over by artifact discovery: one :class:`File`
per discovered distribution, wrapped with its parsed filename and origin
index into a :class:`FlatIndexEntry`, and collected into a
:class:`FlatIndexEntries` batch together with the "any source unreachable"
flag.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple
from urllib.parse import unquote, urlsplit

from distsift.constants import HASH_ALGORITHMS
from distsift.models.filename import DistFilename, parse_dist_filename


@dataclass(frozen=True)
class HashDigest:
    """A single ``algorithm:digest`` pair.

    Both parts are stored lower-case so that digests from different
    sources compare equal.
    """

    algorithm: str
    digest: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "algorithm", self.algorithm.lower())
        object.__setattr__(self, "digest", self.digest.lower())

    @classmethod
    def parse(cls, value: str) -> HashDigest:
        """Parse ``"sha256:abc…"`` or ``"sha256=abc…"``.

        Raises:
            ValueError: ``value`` has no separator or an empty part.
        """
        for separator in (":", "="):
            algorithm, sep, digest = value.strip().partition(separator)
            if sep and algorithm and digest:
                return cls(algorithm=algorithm, digest=digest)
        raise ValueError(f"Invalid hash digest: {value!r}")

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.digest}"


@dataclass(frozen=True)
class File:
    """A discovered distribution file.

    Attributes:
        filename: Bare file name.
        hashes: Digests known for the file (possibly empty).
        url: Where the file was found, if known.
        size: Size in bytes, if known.
    """

    filename: str
    hashes: Tuple[HashDigest, ...] = ()
    url: Optional[str] = None
    size: Optional[int] = None

    @classmethod
    def from_url(cls, url: str, *, size: Optional[int] = None) -> File:
        """Build a file from a find-links style URL or path.

        A ``#sha256=<digest>`` fragment (any algorithm in
        :data:`~distsift.constants.HASH_ALGORITHMS`) becomes a known digest.

        Example::

            >>> f = File.from_url("https://host/idna-3.6.tar.gz#sha256=ABC")
            >>> f.filename, [str(h) for h in f.hashes]
            ('idna-3.6.tar.gz', ['sha256:abc'])
        """
        parts = urlsplit(url)
        filename = unquote(parts.path.rsplit("/", 1)[-1])

        hashes: Tuple[HashDigest, ...] = ()
        if parts.fragment:
            algorithm, _, digest = parts.fragment.partition("=")
            if algorithm.lower() in HASH_ALGORITHMS and digest:
                hashes = (HashDigest(algorithm, digest),)

        return cls(filename=filename, hashes=hashes, url=url, size=size)


@dataclass(frozen=True)
class FlatIndexEntry:
    """A file with its parsed filename and origin index."""

    filename: DistFilename
    file: File
    index: str

    @classmethod
    def from_file(cls, file: File, index: str) -> Optional[FlatIndexEntry]:
        """Wrap ``file`` if its name parses as a distribution."""
        filename = parse_dist_filename(file.filename)
        if filename is None:
            return None
        return cls(filename=filename, file=file, index=index)


@dataclass(frozen=True)
class FlatIndexEntries:
    """A finite batch of entries from one or more flat sources.

    Attributes:
        entries: Entries in arrival order.
        offline: True if any contributing source could not be reached.
    """

    entries: Tuple[FlatIndexEntry, ...] = field(default_factory=tuple)
    offline: bool = False

    @classmethod
    def offline_source(cls) -> FlatIndexEntries:
        """An empty batch for a source that could not be reached."""
        return cls(entries=(), offline=True)

    @classmethod
    def merge(cls, batches: Iterable[FlatIndexEntries]) -> FlatIndexEntries:
        """Concatenate batches in order, OR-ing their ``offline`` flags."""
        return functools.reduce(
            lambda acc, batch: cls(
                entries=acc.entries + batch.entries,
                offline=acc.offline or batch.offline,
            ),
            batches,
            cls(),
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
