"""Tests for EngineSelector."""

import pytest

from conftest import FakeBridge
from versioning.engine import RUBY_ENGINE_VERSION_CODE, EngineSelector
from versioning.errors import BridgeIOFailure, MissingVariantVersion
from versioning.models import Manifest


class TestEngine:
    """Engine reported by the Gemfile's ruby directive."""

    def test_defaults_to_ruby_without_directive(self, app_dir):
        assert EngineSelector(FakeBridge(result=None)).engine(Manifest(app_dir)) == "ruby"

    def test_reports_jruby(self, app_dir):
        bridge = FakeBridge(result={"engine": "jruby", "engine_version": "9.1.12.0"})

        assert EngineSelector(bridge).engine(Manifest(app_dir)) == "jruby"

    def test_reports_unsupported_engines_verbatim(self, app_dir):
        bridge = FakeBridge(result={"engine": "rbx", "engine_version": "3.2"})

        assert EngineSelector(bridge).engine(Manifest(app_dir)) == "rbx"

    def test_directive_is_evaluated_in_gemfile_directory(self, app_dir):
        bridge = FakeBridge(result=None)
        EngineSelector(bridge).engine(Manifest(app_dir))

        assert bridge.calls[0][0] == app_dir
        assert "ruby_version" in bridge.calls[0][1]


class TestVariantVersion:
    """Pinned jruby engine version."""

    def test_returns_engine_version(self, app_dir):
        bridge = FakeBridge(result={"engine": "jruby", "engine_version": "9.1.12.0"})

        assert EngineSelector(bridge).variant_version(Manifest(app_dir)) == "9.1.12.0"

    def test_missing_engine_version_fails(self, app_dir):
        bridge = FakeBridge(result={"engine": "jruby", "engine_version": None})

        with pytest.raises(MissingVariantVersion):
            EngineSelector(bridge).variant_version(Manifest(app_dir))

    def test_empty_for_primary_engine(self, app_dir):
        bridge = FakeBridge(result={"engine": "ruby", "engine_version": "2.4.1"})

        assert EngineSelector(bridge).variant_version(Manifest(app_dir)) == ""

    def test_empty_without_directive(self, app_dir):
        assert EngineSelector(FakeBridge(result=None)).variant_version(Manifest(app_dir)) == ""


class TestRubyEngineVersion:
    """RbConfig ruby_version of the installed interpreter."""

    def test_returns_rbconfig_value(self, app_dir):
        bridge = FakeBridge(result="2.4.0")

        assert EngineSelector(bridge).ruby_engine_version(app_dir) == "2.4.0"
        assert bridge.calls[0][1] == RUBY_ENGINE_VERSION_CODE

    def test_non_string_is_io_failure(self, app_dir):
        with pytest.raises(BridgeIOFailure):
            EngineSelector(FakeBridge(result=None)).ruby_engine_version(app_dir)


class TestDirectiveFragment:
    """Ruby fragment used to read the ruby directive."""

    def test_recovers_engine_when_engine_version_is_missing(self, app_dir):
        bridge = FakeBridge(result=None)
        EngineSelector(bridge).engine(Manifest(app_dir))

        code = bridge.calls[0][1]
        assert "rescue Bundler::GemfileError" in code
        assert 'e.message.include?("engine_version")' in code
        assert "reader.eval_gemfile('Gemfile')" in code
