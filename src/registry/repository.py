"""Remote package pool backed by a Composer v2 repository.

Metadata is fetched once per package by ``preload``; lookups afterwards are
answered from memory only.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from registry.pool import InMemoryPackagePool, iter_version_entries
from versioning.parser import VersionParser

logger = logging.getLogger(__name__)


class RepositoryPackagePool(InMemoryPackagePool):
    """In-memory pool populated from ``<base>/p2/<name>.json`` metadata."""

    def __init__(self, base_url: str = Constants.REPOSITORY_URL_DEFAULT,
                 parser: Optional[VersionParser] = None):
        super().__init__(parser=parser)
        self.base_url = base_url.rstrip("/")
        self._loaded = set()
        # URLs that failed at the transport level (no HTTP status at all)
        self.errors: List[str] = []

    def metadata_urls(self, name: str):
        """Stable and dev metadata URLs for ``name``."""
        prefix = f"{self.base_url}/{Constants.REPOSITORY_METADATA_PATH}/{name.lower()}"
        return [f"{prefix}.json", f"{prefix}~dev.json"]

    def preload(self, names: Iterable[str]) -> None:
        """Fetch metadata for every name not loaded yet."""
        for name in names:
            key = name.lower()
            if key in self._loaded:
                continue
            self._loaded.add(key)
            count = 0
            for url in self.metadata_urls(key):
                count += self._load_url(key, url)
            if count == 0:
                logger.warning("No versions found for %s in %s", key, safe_url(self.base_url))

    def _load_url(self, name: str, url: str) -> int:
        status_code, _, data = get_json(url)
        if status_code == 0:
            self.errors.append(url)
        if status_code != 200 or not isinstance(data, dict):
            if is_debug_enabled(logger):
                logger.debug(
                    "Repository metadata unavailable",
                    extra=extra_context(
                        event="fetch",
                        component="repository_pool",
                        action="preload",
                        outcome="missing",
                        status_code=status_code,
                        target=safe_url(url),
                    )
                )
            return 0

        entries = (data.get("packages") or {}).get(name, [])
        count = 0
        for pretty_version in iter_version_entries(name, entries):
            if self.add_version(name, pretty_version):
                count += 1
        return count
