"""Tests for version normalization and stability parsing."""

import pytest

from versioning.parser import InvalidVersionError, VersionParser


@pytest.fixture
def parser():
    """Create a fresh parser for each test."""
    return VersionParser()


class TestNormalizeReleases:
    """Numeric release versions."""

    @pytest.mark.parametrize("raw,expected", [
        ("1.2", "1.2.0.0"),
        ("v2.0.1", "2.0.1.0"),
        ("1.2.3.4", "1.2.3.4"),
        ("1.0.0-beta2", "1.0.0.0-beta2"),
        ("1.0.0-RC1", "1.0.0.0-RC1"),
        ("1.0.0-alpha3", "1.0.0.0-alpha3"),
        ("1.0-dev", "1.0.0.0-dev"),
        ("1.0.0+build.5", "1.0.0.0"),
        ("1.0.0@beta", "1.0.0.0"),
        ("  3.1  ", "3.1.0.0"),
    ])
    def test_release_versions(self, parser, raw, expected):
        assert parser.normalize(raw) == expected

    def test_alias_keeps_left_side(self, parser):
        """Inline aliases normalize to the aliased version."""
        assert parser.normalize("dev-master as 1.0.0") == "dev-master"


class TestNormalizeBranches:
    """Development branches, named and numeric."""

    def test_named_branch_with_dev_suffix(self, parser):
        assert parser.normalize("feature-x-dev") == "dev-feature-x"

    def test_dev_prefix_is_kept(self, parser):
        assert parser.normalize("dev-feature-x") == "dev-feature-x"

    def test_both_spellings_normalize_alike(self, parser):
        assert parser.normalize("feature-x-dev") == parser.normalize("dev-feature-x")

    def test_numeric_wildcard_branch(self, parser):
        assert parser.normalize("2.x-dev") == "2.9999999.9999999.9999999-dev"
        assert parser.normalize("1.0.x-dev") == "1.0.9999999.9999999-dev"

    def test_normalize_branch_named(self, parser):
        assert parser.normalize_branch("develop") == "dev-develop"

    def test_normalize_branch_numeric(self, parser):
        assert parser.normalize_branch("1.2") == "1.2.9999999.9999999-dev"

    def test_branch_label_that_is_not_a_version(self, parser):
        """Configured labels like 'develop' are taken as branch names."""
        assert parser.normalize_branch_label("develop") == "dev-develop"

    def test_branch_label_that_is_a_version(self, parser):
        assert parser.normalize_branch_label("1.x-dev") == "1.9999999.9999999.9999999-dev"
        assert parser.normalize_branch_label("dev-develop") == "dev-develop"

    def test_branch_label_ending_in_dev_without_separator(self, parser):
        """A trailing 'dev' only counts as a suffix after '-' or '.'."""
        assert parser.normalize_branch_label("mydev") == "dev-mydev"
        assert parser.normalize_branch_label("my.dev") == "dev-my"

    def test_numeric_branch_without_separator(self, parser):
        assert parser.normalize("2.xdev") == "2.9999999.9999999.9999999-dev"


class TestNormalizeInvalid:
    """Strings that are neither releases nor branches."""

    @pytest.mark.parametrize("raw", ["develop", "dev", "dev-", "mydev", "not a version", "1!2.0"])
    def test_invalid_versions_raise(self, parser, raw):
        with pytest.raises(InvalidVersionError):
            parser.normalize(raw)

    def test_invalid_version_is_value_error(self, parser):
        with pytest.raises(ValueError):
            parser.normalize("develop")


class TestParseStability:
    """Stability detection."""

    @pytest.mark.parametrize("version,expected", [
        ("dev-feature-x", "dev"),
        ("1.0.9999999.9999999-dev", "dev"),
        ("1.0.0.0-dev", "dev"),
        ("1.0.0.0-beta2", "beta"),
        ("1.0.0.0-alpha1", "alpha"),
        ("1.0.0.0-RC1", "RC"),
        ("1.0.0.0-patch1", "stable"),
        ("1.0.0.0", "stable"),
        ("1.0.0+no-version-set", "stable"),
    ])
    def test_stability(self, version, expected):
        assert VersionParser.parse_stability(version) == expected

    def test_is_dev(self, parser):
        assert parser.is_dev(parser.normalize("feature-x-dev"))
        assert not parser.is_dev(parser.normalize("1.0.0"))
