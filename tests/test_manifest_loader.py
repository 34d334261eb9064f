"""Tests for root manifest loading and root version detection."""

import json
import subprocess
from unittest.mock import Mock, patch

import pytest

from manifest.loader import (
    ManifestError,
    guess_git_version,
    load_root_package,
    root_package_from_dict,
)
from versioning.models import DeclaredConstraint


def write_manifest(tmp_path, data):
    path = tmp_path / "composer.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def no_root_version_env(monkeypatch):
    """Keep the environment from leaking into version detection."""
    monkeypatch.delenv("COMPOSER_ROOT_VERSION", raising=False)


class TestLoadRootPackage:
    """Reading composer.json-shaped manifests."""

    def test_basic_manifest(self, tmp_path):
        path = write_manifest(tmp_path, {
            "name": "Acme/App",
            "version": "feature-x-dev",
            "require": {"acme/widgets": "^1.0", "PSR/Log": "^3.0"},
            "require-dev": {"phpunit/phpunit": "^10.0"},
            "extra": {"feature-branch-repositories": ["acme/widgets"]},
        })
        root = load_root_package(path)

        assert root.name == "acme/app"
        assert root.pretty_version == "feature-x-dev"
        assert root.version == "dev-feature-x"
        assert root.is_dev
        assert list(root.requires) == ["acme/widgets", "psr/log"]
        assert root.requires["acme/widgets"].constraint == DeclaredConstraint("^1.0")
        assert root.requires["acme/widgets"].source == "acme/app"
        assert root.dev_requires["phpunit/phpunit"].description == "requires (for development)"
        assert root.extra == {"feature-branch-repositories": ["acme/widgets"]}

    def test_stable_root(self, tmp_path):
        path = write_manifest(tmp_path, {"name": "acme/app", "version": "1.2.0"})
        root = load_root_package(path)
        assert root.version == "1.2.0.0"
        assert not root.is_dev
        assert root.requires == {}

    def test_explicit_root_version_wins(self, tmp_path):
        path = write_manifest(tmp_path, {"name": "acme/app", "version": "1.2.0"})
        root = load_root_package(path, root_version="dev-feature-y")
        assert root.version == "dev-feature-y"

    def test_env_root_version(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMPOSER_ROOT_VERSION", "feature-z-dev")
        path = write_manifest(tmp_path, {"name": "acme/app"})
        assert load_root_package(path).version == "dev-feature-z"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError):
            load_root_package(str(tmp_path / "composer.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "composer.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestError):
            load_root_package(str(path))

    def test_non_object_manifest(self, tmp_path):
        path = write_manifest(tmp_path, ["acme/widgets"])
        with pytest.raises(ManifestError):
            load_root_package(path)

    def test_unnamed_root(self):
        root = root_package_from_dict({"version": "1.0.0"})
        assert root.name == "__root__"


class TestGitVersionGuessing:
    """Root version derived from the checked-out branch."""

    @patch("manifest.loader.subprocess.run")
    def test_named_branch(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="feature/login\n")
        assert guess_git_version("/tmp") == "dev-feature/login"

    @patch("manifest.loader.subprocess.run")
    def test_numeric_branch(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="2.x\n")
        assert guess_git_version("/tmp") == "2.x-dev"

    @patch("manifest.loader.subprocess.run")
    def test_detached_head(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="HEAD\n")
        assert guess_git_version("/tmp") is None

    @patch("manifest.loader.subprocess.run")
    def test_not_a_repository(self, mock_run):
        mock_run.return_value = Mock(returncode=128, stdout="")
        assert guess_git_version("/tmp") is None

    @patch("manifest.loader.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_git_missing(self, _mock_run):
        assert guess_git_version("/tmp") is None

    @patch("manifest.loader.subprocess.run", side_effect=subprocess.TimeoutExpired("git", 10))
    def test_git_timeout(self, _mock_run):
        assert guess_git_version("/tmp") is None

    @patch("manifest.loader.subprocess.run")
    def test_manifest_without_version_uses_git(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=0, stdout="feature-x\n")
        root = load_root_package(write_manifest(tmp_path, {"name": "acme/app"}))
        assert root.pretty_version == "dev-feature-x"
        assert root.is_dev

    @patch("manifest.loader.subprocess.run")
    def test_fallback_placeholder_version(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=128, stdout="")
        root = load_root_package(write_manifest(tmp_path, {"name": "acme/app"}))
        assert root.pretty_version == "1.0.0+no-version-set"
        assert root.version == "1.0.0.0"
        assert not root.is_dev
