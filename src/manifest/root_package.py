"""Root project descriptor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from versioning.models import RequirementMap
from versioning.parser import VersionParser


@dataclass
class RootPackage:
    """The project being installed.

    Everything is read-only for the plugin except ``requires`` and
    ``dev_requires``, which are replaced wholesale after a rewrite.
    """
    name: str
    version: str
    pretty_version: str
    requires: RequirementMap = field(default_factory=dict)
    dev_requires: RequirementMap = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def stability(self) -> str:
        return VersionParser.parse_stability(self.version)

    @property
    def is_dev(self) -> bool:
        """True when the root is checked out on a development version."""
        return self.stability == 'dev'
