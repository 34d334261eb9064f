"""Feature branch plugin: wires the rewriter into the install/update lifecycle."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from constants import LifecycleEvents
from manifest.root_package import RootPackage
from plugin.config import EligibilityConfig
from plugin.events import PluginEvent
from plugin.rewriter import BranchConstraintRewriter, RewriteDecision
from registry.pool import InMemoryPackagePool, PackagePool

logger = logging.getLogger(__name__)


class FeatureBranchPlugin:
    """Pins eligible dependencies to the root's development branch."""

    def __init__(self, rewriter: Optional[BranchConstraintRewriter] = None):
        self.rewriter = rewriter or BranchConstraintRewriter()
        self.config = EligibilityConfig()
        self.pool: Optional[PackagePool] = None

    def activate(
        self,
        root: RootPackage,
        pool: Optional[PackagePool] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Read the eligibility configuration once for the whole run."""
        self.config = EligibilityConfig.from_extra(root.extra).merged(overrides)
        self.pool = pool
        logger.debug(
            "Feature branch plugin active for %d repositories", len(self.config.repositories)
        )

    @staticmethod
    def get_subscribed_events():
        """Event name -> (handler, priority)."""
        return {
            LifecycleEvents.PRE_INSTALL_CMD.value: ("resolve_feature_branches", 0),
            LifecycleEvents.PRE_UPDATE_CMD.value: ("resolve_feature_branches", 0),
            LifecycleEvents.PRE_DEPENDENCIES_SOLVING.value: ("resolve_feature_branches", 0),
        }

    def resolve_feature_branches(self, event: PluginEvent) -> List[RewriteDecision]:
        """Rewrite the root's requirements in place and return the decisions."""
        root = event.root
        if self.config.is_empty:
            logger.info("No feature branch repositories configured; nothing to do.")
            return []
        if not root.is_dev:
            logger.info("Root version %s is not a development version; skipping.", root.pretty_version)
            return []

        # An empty pool is falsy; only a missing one defers to activation.
        pool = event.pool if event.pool is not None else self.pool
        if pool is None:
            logger.warning("No package pool available; only configured fallbacks can apply.")
            pool = InMemoryPackagePool()

        logger.info("Resolving feature branch %s for %s", root.pretty_version, event.name)
        result = self.rewriter.rewrite(root, self.config, pool, root.requires)
        dev_result = self.rewriter.rewrite(root, self.config, pool, root.dev_requires)
        root.requires = result.requirements
        root.dev_requires = dev_result.requirements
        return result.decisions + dev_result.decisions
