"""Tests for the Versions facade."""

import os

import pytest

from conftest import FakeBridge
from buildpack.manifest import Dependency
from versioning.errors import NoMatchingVersion
from versioning.models import Manifest
from versioning.service import Versions
from versioning.specs import LOCKFILE_SPECS_CODE


class FakeCatalog:
    """Catalog provider with fixed versions and a default."""

    def __init__(self, versions, default="3.2.1"):
        self.versions = versions
        self.default = default
        self.default_calls = 0

    def all_dependency_versions(self, name):
        assert name == "ruby"
        return list(self.versions)

    def default_version(self, name):
        self.default_calls += 1
        return Dependency(name=name, version=self.default)


def version_bridge(result):
    def handler(directory, code, data):
        if "Gem::Requirement.create(b.versions)" in code:
            return result
        if code == LOCKFILE_SPECS_CODE:
            return {"roda": "2.28.0"}
        raise AssertionError(f"unexpected fragment: {code}")
    return FakeBridge(handler)


class TestVersion:
    """Ruby version with default fallback."""

    def test_unconstrained_returns_default_verbatim(self, app_dir):
        catalog = FakeCatalog(["1.2.3", "2.2.3", "2.2.4", "2.2.1", "3.1.2"])
        versions = Versions(app_dir, catalog, version_bridge(None))

        assert versions.version() == "3.2.1"
        assert catalog.default_calls == 1

    def test_constrained_does_not_consult_default(self, app_dir):
        catalog = FakeCatalog(["2.2.3", "2.2.4"])
        versions = Versions(app_dir, catalog, version_bridge({"requirement": "~> 2.2.0", "version": "2.2.4"}))

        assert versions.version() == "2.2.4"
        assert catalog.default_calls == 0

    def test_no_match_propagates(self, app_dir):
        catalog = FakeCatalog(["1.2.3", "3.1.2"])
        versions = Versions(app_dir, catalog, version_bridge({"requirement": "~> 2.2.0", "version": None}))

        with pytest.raises(NoMatchingVersion):
            versions.version()

    def test_idempotent(self, app_dir):
        catalog = FakeCatalog(["2.2.4"])
        versions = Versions(app_dir, catalog, version_bridge({"requirement": "~> 2.2.0", "version": "2.2.4"}))

        assert versions.version() == versions.version()


class TestConstruction:
    """Manifest discovery and per-instance state."""

    def test_build_dir_honours_bundle_gemfile(self, app_dir, monkeypatch):
        monkeypatch.setenv("BUNDLE_GEMFILE", "gems.rb")
        versions = Versions(app_dir, FakeCatalog([]), FakeBridge())

        assert versions.manifest.gemfile_path == os.path.join(app_dir, "gems.rb")
        assert versions.manifest.lockfile_path == os.path.join(app_dir, "gems.locked")

    def test_explicit_manifest_is_used(self, app_dir):
        manifest = Manifest(app_dir, "Gemfile.next")
        versions = Versions(manifest, FakeCatalog([]), FakeBridge())

        assert versions.manifest is manifest
        assert versions.manifest.lockfile_path.endswith("Gemfile.next.lock")

    def test_instances_do_not_share_spec_tables(self, app_dir):
        bridge = version_bridge(None)
        first = Versions(app_dir, FakeCatalog([]), bridge)
        second = Versions(app_dir, FakeCatalog([]), bridge)

        first.has_gem("roda")
        assert first.specs.built
        assert not second.specs.built

    def test_package_aliases(self, app_dir):
        versions = Versions(app_dir, FakeCatalog([]), version_bridge(None))

        assert versions.has_package("roda") is True
        assert versions.package_version("roda") == "2.28.0"
        assert versions.package_major_version("rails") == -1
        assert versions.satisfies_version("rails", ">=4") is False


class TestRelativeBuildDir:
    """Paths handed to ruby stay valid when the build dir is relative."""

    def test_relative_dir_is_made_absolute(self, tmp_path, monkeypatch):
        app = tmp_path / "app"
        app.mkdir()
        (app / "Gemfile").write_text("gem 'roda'\n")
        (app / "Gemfile.lock").write_text("GEM\n  specs:\n    roda (2.28.0)\n")
        monkeypatch.chdir(tmp_path)
        bridge = version_bridge(None)

        versions = Versions("app", FakeCatalog([]), bridge)
        assert versions.has_gem("roda") is True

        directory, _, data = bridge.calls[0]
        assert directory == str(app)
        assert data == {"gemfilelock": str(app / "Gemfile.lock")}

    def test_manifest_build_dir_is_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert Manifest("app").build_dir == str(tmp_path / "app")


class TestConfiguredBridge:
    """The default bridge snapshots Constants at construction."""

    def test_default_bridge_uses_current_constants(self, app_dir, monkeypatch):
        from constants import Constants

        monkeypatch.setattr(Constants, "RUBY_BINARY", "/opt/ruby/bin/ruby")
        monkeypatch.setattr(Constants, "BRIDGE_TIMEOUT_SEC", 9)

        versions = Versions(app_dir, FakeCatalog([]))

        assert versions.bridge.ruby_binary == "/opt/ruby/bin/ruby"
        assert versions.bridge.timeout == 9
