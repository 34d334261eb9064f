"""Feature branch plugin and its constraint rewriter."""

from .config import EligibilityConfig
from .events import EventDispatcher, PluginEvent
from .feature_branch import FeatureBranchPlugin
from .rewriter import BranchConstraintRewriter, RewriteDecision, RewriteResult

__all__ = [
    "BranchConstraintRewriter",
    "EligibilityConfig",
    "EventDispatcher",
    "FeatureBranchPlugin",
    "PluginEvent",
    "RewriteDecision",
    "RewriteResult",
]
