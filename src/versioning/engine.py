"""Engine selection: which Ruby implementation the Gemfile asks for."""

from __future__ import annotations

import logging

from constants import Constants

from .bridge import quote_ruby
from .errors import BridgeIOFailure, MissingVariantVersion
from .models import Manifest

logger = logging.getLogger(__name__)

RUBY_DIRECTIVE_CODE = """
    begin
      b = Bundler::Dsl.evaluate('%(gemfile)s', '%(lockfile)s', {}).ruby_version
    rescue Bundler::GemfileError => e
      raise unless e.message.include?("engine_version")
      reader = Class.new(Bundler::Dsl) do
        attr_reader :declared_engine
        define_method(:ruby) do |*args|
          opts = args.last.is_a?(Hash) ? args.last : {}
          @declared_engine = (opts[:engine] || opts["engine"]).to_s
        end
      end.new
      reader.eval_gemfile('%(gemfile)s')
      return { "engine" => reader.declared_engine, "engine_version" => nil }
    end
    return nil if !b
    { "engine" => b.engine.to_s, "engine_version" => Array(b.engine_versions).first }
"""

RUBY_ENGINE_VERSION_CODE = "require 'rbconfig'; RbConfig::CONFIG['ruby_version']"


class EngineSelector:
    """Reports the engine a Gemfile requests; support checks belong to callers."""

    def __init__(self, bridge):
        self.bridge = bridge

    def _directive(self, manifest: Manifest):
        code = RUBY_DIRECTIVE_CODE % {
            "gemfile": quote_ruby(manifest.gemfile_name),
            "lockfile": quote_ruby(manifest.lockfile_name),
        }
        data = self.bridge.evaluate(manifest.directory, code, {})
        if data is None:
            return None
        if not isinstance(data, dict):
            raise BridgeIOFailure(f"Expected a ruby directive mapping, got {type(data).__name__}")
        return data

    def engine(self, manifest: Manifest) -> str:
        directive = self._directive(manifest)
        if not directive or not directive.get("engine"):
            return Constants.PRIMARY_ENGINE
        return str(directive["engine"])

    def variant_version(self, manifest: Manifest) -> str:
        """Pinned version of the alternate engine, e.g. ``9.1.12.0`` for jruby.

        Returns ``""`` when the Gemfile does not select the alternate engine.
        """
        directive = self._directive(manifest)
        if not directive or directive.get("engine") != Constants.ALTERNATE_ENGINE:
            return ""
        version = directive.get("engine_version")
        if not version:
            raise MissingVariantVersion(Constants.ALTERNATE_ENGINE)
        return str(version)

    def ruby_engine_version(self, directory: str) -> str:
        """ABI version of the interpreter on PATH, e.g. ``2.4.0``."""
        data = self.bridge.evaluate(directory, RUBY_ENGINE_VERSION_CODE, [])
        if not isinstance(data, str):
            raise BridgeIOFailure(f"Expected a ruby_version string, got {type(data).__name__}")
        return data
