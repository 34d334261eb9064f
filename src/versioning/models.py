"""Data models for requirements and version constraints."""

from dataclasses import dataclass, replace
from typing import Dict, Union


@dataclass(frozen=True)
class VersionConstraint:
    """Exact-match constraint on a normalized version.

    ``pretty_string`` keeps the human-readable label (for example the branch
    name as written by the user) while ``version`` holds the normalized form
    the host compares against.
    """
    operator: str
    version: str
    pretty_string: str

    def __str__(self) -> str:
        return f"{self.operator} {self.version}"


@dataclass(frozen=True)
class DeclaredConstraint:
    """Constraint expression as declared in a manifest.

    The expression is interpreted only by the host resolver; it is carried
    through untouched unless a rewrite replaces it.
    """
    pretty_string: str

    def __str__(self) -> str:
        return self.pretty_string


Constraint = Union[VersionConstraint, DeclaredConstraint]


@dataclass(frozen=True)
class Requirement:
    """A named dependency of ``source`` on ``target``."""
    source: str
    target: str
    constraint: Constraint
    description: str = "requires"
    pretty_constraint: str = ""

    def with_constraint(self, constraint: Constraint) -> "Requirement":
        """Return a copy carrying ``constraint`` and its display label."""
        return replace(self, constraint=constraint, pretty_constraint=constraint.pretty_string)

    def __str__(self) -> str:
        return f"{self.source} {self.description} {self.target} ({self.pretty_constraint})"


# Requirement collections are keyed by lower-cased target name, in declaration order.
RequirementMap = Dict[str, Requirement]
