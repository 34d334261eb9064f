"""Package pools: the set of package versions available to the resolver.

The rewriter only ever asks ``exists(name, version)`` against a pool that is
already populated in memory.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional

from manifest.loader import ManifestError, read_json_file
from versioning.parser import InvalidVersionError, VersionParser

logger = logging.getLogger(__name__)


class PackagePool(ABC):
    """Lookup capability over available package versions."""

    @abstractmethod
    def exists(self, name: str, version: str) -> bool:
        """Return True when ``name`` is available at the normalized ``version``."""


class InMemoryPackagePool(PackagePool):
    """Pool backed by a dict of name -> {normalized version: pretty version}."""

    def __init__(
        self,
        packages: Optional[Mapping[str, Iterable[str]]] = None,
        parser: Optional[VersionParser] = None,
    ):
        self.parser = parser or VersionParser()
        self._packages: Dict[str, Dict[str, str]] = {}
        for name, versions in (packages or {}).items():
            for pretty_version in versions:
                self.add_version(name, pretty_version)

    def add_version(self, name: str, pretty_version: str) -> bool:
        """Register ``name`` at ``pretty_version``; invalid versions are skipped."""
        try:
            normalized = self.parser.normalize(str(pretty_version))
        except InvalidVersionError:
            logger.debug("Skipping %s at unparseable version %s", name, pretty_version)
            return False
        self._packages.setdefault(name.lower(), {})[normalized] = str(pretty_version)
        return True

    def exists(self, name: str, version: str) -> bool:
        return version in self._packages.get(name.lower(), {})

    def versions(self, name: str) -> List[str]:
        """Pretty versions known for ``name``."""
        return list(self._packages.get(name.lower(), {}).values())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._packages

    def __len__(self) -> int:
        return len(self._packages)


def iter_version_entries(name: str, entries: Any) -> Iterable[str]:
    """Yield pretty versions from a repository ``packages`` entry.

    Entries are either a mapping of version -> metadata or a list of
    metadata dicts carrying a ``version`` key.
    """
    if isinstance(entries, dict):
        for version, meta in entries.items():
            if isinstance(meta, dict) and meta.get("version"):
                yield str(meta["version"])
            else:
                yield str(version)
    elif isinstance(entries, list):
        for meta in entries:
            if isinstance(meta, dict) and meta.get("version"):
                yield str(meta["version"])
    else:
        logger.debug("Ignoring unexpected metadata shape for %s", name)


def pool_from_dict(data: Mapping[str, Any], parser: Optional[VersionParser] = None) -> InMemoryPackagePool:
    """Build a pool from an installed-package or repository snapshot.

    Installed-package lists carry ``{name, version}`` dicts under
    ``packages``; repository snapshots map names under ``packages`` to their
    versions. Any other top-level key is ignored.
    """
    pool = InMemoryPackagePool(parser=parser)
    section = data.get("packages")
    if isinstance(section, list):
        for meta in section:
            if isinstance(meta, dict) and meta.get("name") and meta.get("version"):
                pool.add_version(str(meta["name"]), str(meta["version"]))
    elif isinstance(section, dict):
        for name, entries in section.items():
            for pretty_version in iter_version_entries(name, entries):
                pool.add_version(name, pretty_version)
    return pool


def load_pool_file(path: str, parser: Optional[VersionParser] = None) -> InMemoryPackagePool:
    """Load a pool from a local JSON snapshot (installed.json or packages.json).

    Raises:
        ManifestError: If the file cannot be read or is not a JSON object.
    """
    data = read_json_file(path)
    if not isinstance(data, dict):
        raise ManifestError(f"Package snapshot {path} must contain a JSON object")
    pool = pool_from_dict(data, parser=parser)
    logger.info("Loaded %d package(s) from %s", len(pool), path)
    return pool
