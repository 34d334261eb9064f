"""Root manifest loading (composer.json shape).

Reads the root project's name, version, requirements and ``extra`` section
and determines the root version when the manifest does not pin one.
"""
from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any, Dict, Mapping, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from manifest.root_package import RootPackage
from versioning.models import DeclaredConstraint, Requirement, RequirementMap
from versioning.parser import VersionParser

logger = logging.getLogger(__name__)

ROOT_NAME_DEFAULT = "__root__"
REQUIRE_DESCRIPTION = "requires"
REQUIRE_DEV_DESCRIPTION = "requires (for development)"


class ManifestError(ValueError):
    """Raised when a manifest or package snapshot cannot be read."""


def read_json_file(path: str) -> Any:
    """Read and decode a JSON file, wrapping failures in ManifestError."""
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as e:
        raise ManifestError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"Could not read {path}: {e}") from e


def parse_links(source: str, declared: Mapping[str, str], description: str) -> RequirementMap:
    """Build requirements from a ``{name: constraint}`` mapping, keeping declaration order."""
    links: RequirementMap = {}
    for target, pretty_constraint in declared.items():
        pretty_constraint = str(pretty_constraint)
        links[target.lower()] = Requirement(
            source=source,
            target=target.lower(),
            constraint=DeclaredConstraint(pretty_constraint),
            description=description,
            pretty_constraint=pretty_constraint,
        )
    return links


def guess_git_version(base_dir: Optional[str], parser: Optional[VersionParser] = None) -> Optional[str]:
    """Derive a development version from the checked-out git branch.

    Returns ``dev-<branch>`` for named branches, ``<branch>-dev`` for numeric
    ones, or None when git is unavailable or HEAD is detached.
    """
    parser = parser or VersionParser()
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=base_dir or None,
            capture_output=True,
            text=True,
            timeout=Constants.GIT_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Unable to run git for version guessing: %s", exc)
        return None

    branch = result.stdout.strip() if result.returncode == 0 else ""
    if not branch or branch == "HEAD":
        return None

    if parser.normalize_branch(branch).startswith("dev-"):
        return "dev-" + branch
    return branch + "-dev"


def resolve_root_version(
    data: Mapping[str, Any],
    root_version: Optional[str] = None,
    base_dir: Optional[str] = None,
) -> str:
    """Pick the root's pretty version.

    Precedence: explicit value, manifest ``version``, COMPOSER_ROOT_VERSION,
    the current git branch, then a stable placeholder.
    """
    if root_version:
        return root_version
    if data.get("version"):
        return str(data["version"])
    env_version = os.environ.get(Constants.ENV_ROOT_VERSION)
    if env_version and env_version.strip():
        return env_version.strip()
    guessed = guess_git_version(base_dir)
    if guessed:
        logger.info("Root version guessed from git branch: %s", guessed)
        return guessed
    logger.warning(
        "Root version could not be determined; assuming %s", Constants.DEFAULT_ROOT_VERSION
    )
    return Constants.DEFAULT_ROOT_VERSION


def root_package_from_dict(
    data: Dict[str, Any],
    root_version: Optional[str] = None,
    base_dir: Optional[str] = None,
    parser: Optional[VersionParser] = None,
) -> RootPackage:
    """Build a RootPackage from decoded manifest data."""
    parser = parser or VersionParser()
    name = str(data.get("name") or ROOT_NAME_DEFAULT).lower()
    pretty_version = resolve_root_version(data, root_version, base_dir)
    version = parser.normalize(pretty_version)

    package = RootPackage(
        name=name,
        version=version,
        pretty_version=pretty_version,
        requires=parse_links(name, data.get("require") or {}, REQUIRE_DESCRIPTION),
        dev_requires=parse_links(name, data.get("require-dev") or {}, REQUIRE_DEV_DESCRIPTION),
        extra=data.get("extra") or {},
    )
    if is_debug_enabled(logger):
        logger.debug(
            "Loaded root package",
            extra=extra_context(
                event="manifest_loaded",
                component="manifest",
                action="load",
                target=name,
                outcome="dev" if package.is_dev else "stable",
                count=len(package.requires) + len(package.dev_requires),
            )
        )
    return package


def load_root_package(path: str, root_version: Optional[str] = None) -> RootPackage:
    """Load the root manifest at ``path``.

    Raises:
        ManifestError: If the file is missing, unreadable or not a JSON object.
    """
    data = read_json_file(path)
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")
    return root_package_from_dict(
        data,
        root_version=root_version,
        base_dir=os.path.dirname(os.path.abspath(path)),
    )
