"""
Canonical requirement set extracted from a project manifest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from packaging.requirements import Requirement
from packaging.utils import NormalizedName


@dataclass(frozen=True)
class RequiresDist:
    """Statically declared requirements of a project.

    This omits ``version`` and ``requires-python``; neither is needed to
    learn what a project depends on.

    Attributes:
        name: Normalized project name.
        requires_dist: Base requirements followed by extras-derived ones.
            Every extras-derived requirement carries an ``extra == "<group>"``
            marker.
        provides_extras: Optional-dependency group names, in declared order.
        dynamic: True if the project computes its version dynamically.
    """

    name: NormalizedName
    requires_dist: Tuple[Requirement, ...] = ()
    provides_extras: Tuple[NormalizedName, ...] = ()
    dynamic: bool = False

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "requires_dist": [str(requirement) for requirement in self.requires_dist],
            "provides_extras": list(self.provides_extras),
            "dynamic": self.dynamic,
        }

    def __len__(self) -> int:
        return len(self.requires_dist)
