"""Feature branch constraint substitution.

When the root project is on a development branch, every eligible requirement
is pinned to that same branch if the pool has it, or to its configured
fallback branch otherwise. Requirements matching neither are left exactly as
declared.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from constants import RewriteOutcome
from manifest.root_package import RootPackage
from plugin.config import EligibilityConfig
from registry.pool import PackagePool
from versioning.models import RequirementMap, VersionConstraint
from versioning.parser import VersionParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteDecision:
    """What happened to one eligible requirement."""
    target: str
    outcome: RewriteOutcome
    constraint: Optional[VersionConstraint] = None


@dataclass
class RewriteResult:
    requirements: RequirementMap
    decisions: List[RewriteDecision] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return any(d.outcome != RewriteOutcome.NO_MATCH for d in self.decisions)


class BranchConstraintRewriter:
    """Rewrites requirement constraints to the root's feature branch."""

    def __init__(self, parser: Optional[VersionParser] = None):
        self.parser = parser or VersionParser()

    @staticmethod
    def feature_branch_constraint(root: RootPackage) -> VersionConstraint:
        """Exact match on the root's (already normalized) version."""
        return VersionConstraint("==", root.version, root.pretty_version)

    def fallback_constraint(self, label: str) -> VersionConstraint:
        """Exact match on the normalized fallback branch, labelled as configured."""
        return VersionConstraint("==", self.parser.normalize_branch_label(label), label)

    def rewrite(
        self,
        root: RootPackage,
        config: EligibilityConfig,
        pool: PackagePool,
        requirements: Optional[RequirementMap] = None,
    ) -> RewriteResult:
        """Return ``requirements`` (default: the root's) with eligible entries rewritten.

        The returned mapping has the same keys in the same order; the input
        mapping is not modified.
        """
        if requirements is None:
            requirements = root.requires

        if config.is_empty:
            logger.info("No feature branch repositories configured; leaving requirements untouched.")
            return RewriteResult(dict(requirements))

        if not root.is_dev:
            logger.debug("Root %s is at %s, not a development version.", root.name, root.pretty_version)
            return RewriteResult(dict(requirements))

        branch_constraint = self.feature_branch_constraint(root)
        updated: RequirementMap = {}
        decisions: List[RewriteDecision] = []

        for key, requirement in requirements.items():
            if not config.is_eligible(requirement.target):
                updated[key] = requirement
                continue

            logger.info("Checking %s for branch %s", requirement.target, root.pretty_version)

            if pool.exists(requirement.target, branch_constraint.version):
                updated[key] = requirement.with_constraint(branch_constraint)
                decisions.append(RewriteDecision(requirement.target, RewriteOutcome.SWITCHED, branch_constraint))
                logger.info("  %s switched to %s", requirement.target, branch_constraint.pretty_string)
                continue

            fallback = config.fallback_for(requirement.target)
            if fallback is None:
                updated[key] = requirement
                decisions.append(RewriteDecision(requirement.target, RewriteOutcome.NO_MATCH))
                logger.info(
                    "  %s has no branch %s; keeping %s",
                    requirement.target,
                    root.pretty_version,
                    requirement.pretty_constraint,
                )
                continue

            constraint = self.fallback_constraint(fallback)
            updated[key] = requirement.with_constraint(constraint)
            decisions.append(RewriteDecision(requirement.target, RewriteOutcome.FELL_BACK, constraint))
            logger.info("  %s fell back to %s", requirement.target, constraint.pretty_string)

        return RewriteResult(updated, decisions)
