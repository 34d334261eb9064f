"""Version string normalization for branch and release versions.

Human-written versions ("feature-x-dev", "1.2", "v2.0.0-beta1") are turned
into the normalized form used for exact comparisons:

* numeric releases become four dot-separated components plus an optional
  stability suffix (``1.2`` -> ``1.2.0.0``, ``1.0.0-beta2`` -> ``1.0.0.0-beta2``);
* named branches become ``dev-<name>`` (``feature-x-dev`` -> ``dev-feature-x``);
* numeric branches become ``N.N.N.N-dev`` with wildcards expanded
  (``2.x-dev`` -> ``2.9999999.9999999.9999999-dev``).
"""

import re
from typing import Optional

from packaging.version import InvalidVersion, Version

_ALIAS_RE = re.compile(r'^([^,\s]+) +as +([^,\s]+)$')
_STABILITY_FLAG_RE = re.compile(r'@(?:stable|RC|beta|alpha|dev)$', re.IGNORECASE)
_BUILD_METADATA_RE = re.compile(r'^([^,\s+]+)\+[^\s]+$')
_NUMERIC_DEV_SUFFIX_RE = re.compile(r'^(.*?)[.-]?dev$', re.IGNORECASE)
_NAMED_DEV_SUFFIX_RE = re.compile(r'^(.+)[.-]dev$', re.IGNORECASE)
_NUMERIC_BRANCH_RE = re.compile(
    r'^v?(\d+)(\.(?:\d+|[xX*]))?(\.(?:\d+|[xX*]))?(\.(?:\d+|[xX*]))?$', re.IGNORECASE
)
_MODIFIER_RE = re.compile(
    r'[._-]?(?:(stable|beta|b|rc|alpha|a|patch|pl|p)((?:[.-]?\d+)*)?)?([.-]?dev)?(?:\+.*)?$',
    re.IGNORECASE,
)

_PRE_RELEASE_NAMES = {"a": "alpha", "b": "beta", "rc": "RC"}
_WILDCARD = "9999999"


class InvalidVersionError(ValueError):
    """Raised when a version string cannot be normalized."""


class VersionParser:
    """Normalizes version strings and derives their stability."""

    def normalize(self, version: str, full_version: Optional[str] = None) -> str:
        """Normalize ``version`` for exact comparisons.

        Args:
            version: Version as written by a user or repository.
            full_version: Optional original string used in error messages.

        Raises:
            InvalidVersionError: If the string is neither a release nor a branch.
        """
        version = version.strip()
        original = full_version if full_version is not None else version

        alias = _ALIAS_RE.match(version)
        if alias:
            version = alias.group(1)

        version = _STABILITY_FLAG_RE.sub('', version)

        if version.lower().startswith('dev-'):
            name = version[4:]
            if not name:
                raise InvalidVersionError(f'Invalid version string "{original}"')
            return 'dev-' + name

        metadata = _BUILD_METADATA_RE.match(version)
        if metadata:
            version = metadata.group(1)

        release = self._normalize_release(version)
        if release is not None:
            return release

        # "2.x-dev" and "2.xdev" are numeric branches; a named branch needs
        # the separator so "mydev" is not read as branch "my".
        numeric = _NUMERIC_DEV_SUFFIX_RE.match(version)
        if numeric and _NUMERIC_BRANCH_RE.match(numeric.group(1)):
            return self.normalize_branch(numeric.group(1))
        named = _NAMED_DEV_SUFFIX_RE.match(version)
        if named:
            return self.normalize_branch(named.group(1))

        raise InvalidVersionError(f'Invalid version string "{original}"')

    def normalize_branch(self, name: str) -> str:
        """Normalize a branch name (without any ``-dev`` suffix)."""
        name = name.strip()
        m = _NUMERIC_BRANCH_RE.match(name)
        if m:
            parts = [m.group(1)]
            for group in m.groups()[1:]:
                parts.append(group[1:] if group else 'x')
            version = '.'.join(parts)
            for wildcard in ('x', 'X', '*'):
                version = version.replace(wildcard, _WILDCARD)
            return version + '-dev'
        return 'dev-' + name

    def normalize_branch_label(self, label: str) -> str:
        """Normalize a configured branch label such as ``develop`` or ``1.x-dev``.

        Labels that are valid versions are normalized as such; anything else
        is taken as a bare branch name.
        """
        try:
            return self.normalize(label)
        except InvalidVersionError:
            return self.normalize_branch(label)

    @staticmethod
    def parse_stability(version: str) -> str:
        """Return the stability of ``version``: dev, alpha, beta, RC or stable."""
        version = re.sub(r'#.+$', '', version.strip())
        if version.startswith('dev-') or version.endswith('-dev'):
            return 'dev'

        m = _MODIFIER_RE.search(version.lower())
        if m:
            if m.group(3):
                return 'dev'
            modifier = m.group(1)
            if modifier in ('beta', 'b'):
                return 'beta'
            if modifier in ('alpha', 'a'):
                return 'alpha'
            if modifier == 'rc':
                return 'RC'
        return 'stable'

    def is_dev(self, version: str) -> bool:
        """Return True when ``version`` denotes a development version."""
        return self.parse_stability(version) == 'dev'

    @staticmethod
    def _normalize_release(version: str) -> Optional[str]:
        """Normalize a numeric release through PEP 440 parsing, or return None."""
        try:
            parsed = Version(version)
        except InvalidVersion:
            return None
        if parsed.epoch or len(parsed.release) > 4:
            return None

        release = list(parsed.release) + [0] * (4 - len(parsed.release))
        normalized = '.'.join(str(part) for part in release)

        if parsed.pre is not None:
            name, number = parsed.pre
            normalized += '-' + _PRE_RELEASE_NAMES[name] + (str(number) if number else '')
        elif parsed.post is not None:
            normalized += '-patch' + (str(parsed.post) if parsed.post else '')

        if parsed.dev is not None:
            normalized += '-dev'
        return normalized
