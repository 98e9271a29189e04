"""Memoized gem name -> locked version table built from the lock artifact."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from common.logging_utils import extra_context

from .errors import BridgeIOFailure, MissingLockfile
from .models import Manifest

logger = logging.getLogger(__name__)

LOCKFILE_SPECS_CODE = """
    parsed = Bundler::LockfileParser.new(File.read(input["gemfilelock"]))
    Hash[*(parsed.specs.map { |spec| [spec.name, spec.version.to_s] }).flatten]
"""


class SpecTable:
    """Lazily parses the lockfile once and serves lookups from memory.

    Two states: unbuilt until the first call to :meth:`specs`, built forever
    after. An empty lockfile still counts as built.
    """

    def __init__(self, manifest: Manifest, bridge):
        self.manifest = manifest
        self.bridge = bridge
        self._specs: Optional[Dict[str, str]] = None

    @property
    def built(self) -> bool:
        return self._specs is not None

    def specs(self) -> Dict[str, str]:
        if self._specs is not None:
            return self._specs

        lockfile = self.manifest.lockfile_path
        if not self.manifest.has_lockfile():
            raise MissingLockfile(lockfile)

        data = self.bridge.evaluate(self.manifest.directory, LOCKFILE_SPECS_CODE, {"gemfilelock": lockfile})
        if not isinstance(data, dict):
            raise BridgeIOFailure(f"Expected a mapping of gem specs, got {type(data).__name__}")

        self._specs = {str(name): str(version) for name, version in data.items()}
        logger.debug(
            "Parsed lockfile specs",
            extra=extra_context(event="specs_built", lockfile=lockfile, count=len(self._specs)),
        )
        return self._specs

    def get(self, name: str) -> Optional[str]:
        """Locked version for ``name`` or None when absent (or blank)."""
        return self.specs().get(name) or None

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None
