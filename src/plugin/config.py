"""Eligibility configuration for feature branch substitution.

Read once from the root manifest's ``extra`` section:

    "extra": {
        "feature-branch-repositories": ["acme/widgets", "acme/gadgets"],
        "feature-branch-fallbacks": {"acme/widgets": "develop"}
    }

Values are not validated beyond the conversions below; a malformed section
surfaces as the TypeError/ValueError those conversions raise.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from constants import Constants
from manifest.loader import ManifestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityConfig:
    """Which dependencies take part in branch substitution, and their fallbacks.

    ``fallbacks`` is kept as ``(name, label)`` pairs; a mapping passed in is
    converted so the configuration stays hashable.
    """
    repositories: Tuple[str, ...] = ()
    fallbacks: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self):
        if isinstance(self.fallbacks, Mapping):
            object.__setattr__(self, "fallbacks", tuple(self.fallbacks.items()))

    @classmethod
    def from_extra(cls, extra: Optional[Mapping[str, Any]]) -> "EligibilityConfig":
        """Build the configuration from a manifest ``extra`` mapping."""
        extra = extra or {}
        repositories = extra.get(Constants.EXTRA_REPOSITORIES_KEY) or []
        fallbacks = extra.get(Constants.EXTRA_FALLBACKS_KEY) or {}
        return cls(
            repositories=tuple(str(name).lower() for name in repositories),
            fallbacks=tuple((str(name).lower(), str(branch)) for name, branch in dict(fallbacks).items()),
        )

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "EligibilityConfig":
        """Return a copy where keys present in ``overrides`` replace ours."""
        if not overrides:
            return self
        other = EligibilityConfig.from_extra(overrides)
        return EligibilityConfig(
            repositories=(other.repositories
                          if Constants.EXTRA_REPOSITORIES_KEY in overrides else self.repositories),
            fallbacks=(other.fallbacks
                       if Constants.EXTRA_FALLBACKS_KEY in overrides else self.fallbacks),
        )

    @property
    def is_empty(self) -> bool:
        return not self.repositories

    def is_eligible(self, name: str) -> bool:
        return name.lower() in self.repositories

    def fallback_for(self, name: str) -> Optional[str]:
        return dict(self.fallbacks).get(name.lower())


def load_config_file(path: str) -> Dict[str, Any]:
    """Load configuration overrides from a YAML or JSON file.

    Raises:
        ManifestError: If the file cannot be read or does not hold a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                cfg = json.load(fh)
            else:
                cfg = yaml.safe_load(fh)
    except OSError as e:
        raise ManifestError(f"Could not read config file {path}: {e}") from e
    except (ValueError, yaml.YAMLError) as e:
        raise ManifestError(f"Invalid config file {path}: {e}") from e

    cfg = cfg or {}
    if not isinstance(cfg, dict):
        raise ManifestError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded config overrides from %s: %s", path, sorted(cfg))
    return cfg
