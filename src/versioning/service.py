"""Versions: the per-staging-session facade over the resolution core."""

from __future__ import annotations

import logging
from typing import Union

from constants import Constants
from common.logging_utils import extra_context

from .bridge import RubyBridge
from .engine import EngineSelector
from .gems import GemQuery
from .models import Manifest
from .resolver import ConstraintResolver
from .specs import SpecTable

logger = logging.getLogger(__name__)


class Versions:
    """Answers the staging steps' questions about one application.

    Each instance owns a single bridge and a single spec table; create one per
    application being staged and do not share it across threads.

    The default bridge reads Constants.RUBY_BINARY and BRIDGE_TIMEOUT_SEC when
    constructed, so build Versions after constants.apply_config() and any CLI
    overrides have run.

    Args:
        manifest: The application's Gemfile, or its build directory.
        catalog: Provider of ``all_dependency_versions(name)`` and
            ``default_version(name)`` (anything with a ``.version``).
        bridge: Interpreter bridge; defaults to a :class:`RubyBridge`.
    """

    def __init__(self, manifest: Union[Manifest, str], catalog, bridge=None):
        if not isinstance(manifest, Manifest):
            manifest = Manifest.from_environment(manifest)
        self.manifest = manifest
        self.catalog = catalog
        self.bridge = bridge if bridge is not None else RubyBridge()
        self.specs = SpecTable(self.manifest, self.bridge)
        self._resolver = ConstraintResolver(self.bridge)
        self._engines = EngineSelector(self.bridge)
        self._gems = GemQuery(self.specs, self.bridge)

    @property
    def build_dir(self) -> str:
        return self.manifest.build_dir

    def engine(self) -> str:
        return self._engines.engine(self.manifest)

    def version(self) -> str:
        """Ruby version to install: Gemfile constraint, else the catalog default."""
        name = Constants.RUNTIME_DEPENDENCY
        catalog = self.catalog.all_dependency_versions(name)
        version = self._resolver.resolve_version(catalog, self.manifest)
        if version:
            return version

        dep = self.catalog.default_version(name)
        logger.warning(
            "No ruby version specified in %s; using default %s",
            self.manifest.gemfile_name,
            dep.version,
            extra=extra_context(event="ruby_version", outcome="default_fallback", resolved_version=dep.version),
        )
        return dep.version

    def variant_version(self) -> str:
        return self._engines.variant_version(self.manifest)

    jruby_version = variant_version

    def ruby_engine_version(self) -> str:
        return self._engines.ruby_engine_version(self.build_dir)

    def has_gem(self, name: str) -> bool:
        return self._gems.has_gem(name)

    def gem_version(self, name: str) -> str:
        return self._gems.gem_version(name)

    def gem_major_version(self, name: str) -> int:
        return self._gems.gem_major_version(name)

    def has_gem_version(self, name: str, *constraints: str) -> bool:
        return self._gems.has_gem_version(name, *constraints)

    has_package = has_gem
    package_version = gem_version
    package_major_version = gem_major_version
    satisfies_version = has_gem_version
