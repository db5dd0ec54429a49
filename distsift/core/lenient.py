"""Lenient PEP 508 requirement parsing.

Published metadata is full of requirement strings that almost follow the
grammar. Rejecting them outright would make static extraction fail for
many real projects, so :func:`parse_requirement_lenient` first tries a
strict parse and, only if that fails, applies a fixed list of repairs to
the version-specifier part before trying again.

Repairs:

- ``>=1.2.*`` → ``>=1.2`` (wildcards are only valid with ``==``/``!=``)
- ``!=3.0*`` → ``!=3.0.*`` (missing dot before the star)
- ``>=1.2.`` → ``>=1.2`` (trailing dot)
- ``>=1.0 <2.0`` → ``>=1.0,<2.0`` (missing comma between specifiers)
- ``>=1.0,`` → ``>=1.0`` (trailing comma)
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

from packaging.requirements import InvalidRequirement, Requirement

from distsift.utils.logger import get_logger

logger = get_logger("lenient")

__all__ = ["parse_requirement_lenient", "repair_requirement"]

_OPERATOR = r"(?:===|==|!=|~=|>=|<=|>|<)"
_VERSION = r"[0-9][0-9A-Za-z.*+!_-]*"

# (description, pattern, replacement), applied in order
_REPAIRS: List[Tuple[str, "re.Pattern[str]", str]] = [
    (
        "wildcard with ordering operator",
        re.compile(r"(~=|>=|<=|>|<)(\s*[0-9][0-9A-Za-z.]*?)\.\*"),
        r"\1\2",
    ),
    (
        "missing dot before wildcard",
        re.compile(r"(==|!=)(\s*[0-9][0-9.]*[0-9])\*"),
        r"\1\2.*",
    ),
    (
        "trailing dot",
        re.compile(r"(" + _OPERATOR + r"\s*[0-9][0-9A-Za-z.]*[0-9A-Za-z])\.(?=\s*(?:,|\)|$))"),
        r"\1",
    ),
    (
        "missing comma between specifiers",
        re.compile(r"(" + _OPERATOR + r"\s*" + _VERSION + r")\s+(?=" + _OPERATOR + r")"),
        r"\1,",
    ),
    (
        "trailing comma",
        re.compile(r",\s*(?=\)?\s*$)"),
        "",
    ),
]


def repair_requirement(text: str) -> Tuple[str, List[str]]:
    """Apply the known repairs to the specifier part of ``text``.

    The marker part (after ``;``) and direct-URL requirements are left
    untouched.

    Returns:
        The repaired string and the descriptions of the repairs applied.
    """
    spec, sep, marker = text.partition(";")
    if "@" in spec:
        return text, []

    applied: List[str] = []
    for description, pattern, replacement in _REPAIRS:
        repaired = pattern.sub(replacement, spec.rstrip())
        if repaired != spec.rstrip():
            applied.append(description)
            spec = repaired

    if not applied:
        return text, []
    return f"{spec}{' ' if sep else ''}{sep}{marker}", applied


def parse_requirement_lenient(
    text: str,
    *,
    parse: Callable[[str], Requirement] = Requirement,
) -> Requirement:
    """Parse a requirement, repairing minor deviations from PEP 508.

    Args:
        text: Requirement string.
        parse: Strict parser; injectable for tests.

    Returns:
        The parsed requirement.

    Raises:
        packaging.requirements.InvalidRequirement: ``text`` is invalid
            even after repair. The error is the one from the strict parse
            of the original string.

    Example::

        >>> str(parse_requirement_lenient("numpy >=1.19 <2.0"))
        'numpy<2.0,>=1.19'
    """
    try:
        return parse(text)
    except InvalidRequirement as original_error:
        repaired, applied = repair_requirement(text)
        if not applied:
            raise

        try:
            requirement = parse(repaired)
        except InvalidRequirement:
            raise original_error from None

        logger.warning(
            "Repaired invalid requirement %r to %r (%s)",
            text,
            repaired,
            ", ".join(applied),
        )
        return requirement
